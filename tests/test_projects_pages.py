import pytest

from fakes import FakeDriver
from pom_kit.core.errors import ElementNotReady
from pom_kit.core.registry import PageName
from pom_kit.core.settings import Settings
from pom_kit.io.driver import Action
from pom_kit.pages.base import PageState
from pom_kit.pages.projects import ProjectDetailPage, ProjectListPage


@pytest.fixture
def project_driver(driver: FakeDriver) -> FakeDriver:
    driver.add("#project-search")
    driver.add('[data-project-id="42"]')
    driver.add('[data-project-id="42"] .project-title', text="Apollo")

    def _go_to_detail(d: FakeDriver) -> None:
        d.url = "http://app.test/projects/42"
        d.elements.clear()
        d.add("h1.project-name", text="Apollo")
        d.add(".project-description", text="Moon landing")

    driver.on_click['[data-project-id="42"]'] = _go_to_detail
    return driver


@pytest.mark.asyncio
async def test_search_fills_and_submits(project_driver: FakeDriver, fast_settings: Settings) -> None:
    with ProjectListPage(project_driver, settings=fast_settings) as page:
        await page.navigate()
        await page.search("apo")

    box = project_driver.elements["#project-search"]
    assert box.value == "apo"
    assert box.keys == ["Enter"]


@pytest.mark.asyncio
async def test_list_queries(project_driver: FakeDriver, fast_settings: Settings) -> None:
    with ProjectListPage(project_driver, settings=fast_settings) as page:
        await page.navigate()
        assert await page.has_project("42") is True
        assert await page.has_project("7") is False
        assert await page.project_title("42") == "Apollo"
        assert await page.project_title("7") is None


@pytest.mark.asyncio
async def test_open_project_then_hand_over_driver(
    project_driver: FakeDriver, fast_settings: Settings
) -> None:
    listing = ProjectListPage(project_driver, settings=fast_settings)
    await listing.navigate()
    await listing.open_project("42")
    listing.release()

    detail = ProjectDetailPage(project_driver, "42", settings=fast_settings)
    assert detail.url == "http://app.test/projects/42"
    assert detail.descriptor.name is PageName.PROJECT_DETAIL
    await detail.navigate()
    assert await detail.title() == "Apollo"
    assert await detail.description() == "Moon landing"
    assert await detail.is_archived() is False
    detail.release()


@pytest.mark.asyncio
async def test_detail_accepts_sub_paths(driver: FakeDriver, fast_settings: Settings) -> None:
    driver.redirect_to = "http://app.test/projects/42/overview"
    with ProjectDetailPage(driver, "42", settings=fast_settings) as page:
        await page.navigate()
        assert page.state is PageState.NAVIGATED


@pytest.mark.asyncio
async def test_detail_title_requires_heading(driver: FakeDriver, fast_settings: Settings) -> None:
    with ProjectDetailPage(driver, "42", settings=fast_settings) as page:
        await page.navigate()
        with pytest.raises(ElementNotReady) as ei:
            await page.title()
    assert ei.value.selector == "h1.project-name"


@pytest.mark.asyncio
async def test_open_missing_project_never_clicks(
    project_driver: FakeDriver, fast_settings: Settings
) -> None:
    with ProjectListPage(project_driver, settings=fast_settings) as page:
        await page.navigate()
        with pytest.raises(ElementNotReady):
            await page.open_project("7")
    assert not any(c[0] == "act" and c[2] is Action.CLICK for c in project_driver.calls)


@pytest.mark.asyncio
async def test_detail_title_is_always_a_string(driver: FakeDriver, fast_settings: Settings) -> None:
    driver.add("h1.project-name", text=None)
    with ProjectDetailPage(driver, "42", settings=fast_settings) as page:
        await page.navigate()
        assert await page.title() == ""
