"""
Catalog browsing endpoints.
"""
from uuid import uuid4


def test_list_tools_defaults_to_active_sorted_by_name(client, make_tool):
    make_tool("Zapier")
    make_tool("ChatGPT")
    make_tool("Retired", status="inactive")

    response = client.get("/api/tools")

    assert response.status_code == 200
    assert [tool["name"] for tool in response.json()] == ["ChatGPT", "Zapier"]


def test_list_tools_status_filter(client, make_tool):
    make_tool("Live")
    make_tool("Retired", status="inactive")

    names = [tool["name"] for tool in client.get("/api/tools", params={"status": "inactive"}).json()]
    assert names == ["Retired"]
    assert client.get("/api/tools", params={"status": "archived"}).status_code == 422


def test_search_matches_name_or_description(client, make_tool):
    make_tool("Datarails", description="FP&A platform for Excel users")
    make_tool("Jasper", description="Marketing copy generation")
    make_tool("Close Helper", description="Speeds up the excel-based close")

    names = [tool["name"] for tool in client.get("/api/tools", params={"q": "excel"}).json()]
    assert names == ["Close Helper", "Datarails"]

    names = [tool["name"] for tool in client.get("/api/tools", params={"q": "jasper"}).json()]
    assert names == ["Jasper"]


def test_filter_by_category_name(client, make_tool, make_category):
    finance = make_category("Finance & Analytics")
    writing = make_category("Content & Writing")
    make_tool("Datarails", category_id=finance.id)
    make_tool("Jasper", category_id=writing.id)
    make_tool("Loose")

    response = client.get("/api/tools", params={"category": "Finance & Analytics"})

    [tool] = response.json()
    assert tool["name"] == "Datarails"
    assert tool["category_name"] == "Finance & Analytics"


def test_pagination(client, make_tool):
    for name in ["A", "B", "C", "D"]:
        make_tool(name)

    page = client.get("/api/tools", params={"limit": 2, "offset": 1}).json()
    assert [tool["name"] for tool in page] == ["B", "C"]
    assert client.get("/api/tools", params={"limit": 0}).status_code == 422


def test_get_tool(client, make_tool):
    tool = make_tool("Zapier", target_roles=["all"], setup_difficulty="easy")

    response = client.get(f"/api/tools/{tool.id}")
    assert response.status_code == 200
    assert response.json()["target_roles"] == ["all"]
    assert response.json()["category_name"] is None

    assert client.get(f"/api/tools/{uuid4()}").status_code == 404


def test_list_categories(client, make_category):
    make_category("Productivity")
    make_category("Automation")
    assert [c["name"] for c in client.get("/api/categories").json()] == ["Automation", "Productivity"]
