from postchat.models.chat import Mode


def resolve_mode(
    explicit_mode: Mode | str | None = None,
    ground_with_posts: bool | None = None,
) -> Mode:
    """
    Pick the grounding mode for a request.

    Precedence: explicit mode > legacy groundWithPosts flag > strict.
    Only an explicit ``False`` on the legacy flag selects dynamic mode, so
    clients that predate the flag keep getting strict answers.
    """
    if explicit_mode is not None:
        return Mode(explicit_mode)
    if ground_with_posts is False:
        return Mode.DYNAMIC
    return Mode.STRICT
