SEPARATOR = "/"


def join_route(base: str, suffix: str) -> str:
    """
    Склеивает базовый route сервера и path_suffix запроса.
    На стыке всегда ровно один '/', независимо от того, есть ли слэш у base или suffix.
    """
    if base.endswith(SEPARATOR) and suffix.startswith(SEPARATOR):
        return base + suffix[1:]
    if not base.endswith(SEPARATOR) and not suffix.startswith(SEPARATOR):
        return base + SEPARATOR + suffix
    return base + suffix
