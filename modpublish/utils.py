import re


def web_base_url(api_url: str) -> str:
    """
    由 API 地址推导网页地址

    https://api.modrinth.com/v2 -> https://modrinth.com
    https://staging-api.modrinth.com/v2 -> https://staging.modrinth.com
    """
    url = re.sub(r"-?api", "", api_url, count=1)
    url = re.sub(r"/?v2/?", "", url, count=1)
    return re.sub(r"//\.", "//", url, count=1)


def version_web_url(api_url: str, project_id: str, version_id: str) -> str:
    return f"{web_base_url(api_url)}/project/{project_id}/version/{version_id}"
