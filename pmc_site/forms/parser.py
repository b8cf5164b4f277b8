from urllib.parse import parse_qs

FORM_FIELDS = ("name", "email", "subject", "message")


def parse_form(body: bytes | str | None) -> dict[str, str | None]:
    """
    **parse_form**
        decodes an application/x-www-form-urlencoded body, absent fields map to None

    :param body: raw request body
    :return: dict with name, email, subject and message
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    params = parse_qs(body or "", keep_blank_values=True, errors="replace")
    return {field: params[field][0] if field in params else None for field in FORM_FIELDS}
