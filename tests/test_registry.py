import pytest
from pydantic import ValidationError

from pom_kit.core import registry
from pom_kit.core.errors import RegistryError
from pom_kit.core.registry import PageDescriptor, PageName, PageRegistry


@pytest.mark.parametrize("name", list(PageName))
def test_resolve_round_trip(name: PageName) -> None:
    assert registry.resolve(name).name is name


def test_all_names_follow_table_order() -> None:
    assert registry.all_names() == (
        PageName.LOGIN,
        PageName.PROJECT_LIST,
        PageName.PROJECT_DETAIL,
    )


def test_login_descriptor() -> None:
    desc = registry.resolve(PageName.LOGIN)
    assert desc.title == "Login"
    assert desc.url_template == "/login"
    assert desc.url("http://app.test/") == "http://app.test/login"


def test_templated_url_and_placeholders() -> None:
    desc = registry.resolve(PageName.PROJECT_DETAIL)
    assert desc.placeholders == ("project_id",)
    assert desc.url("http://app.test", project_id=42) == "http://app.test/projects/42"


def test_missing_template_value() -> None:
    with pytest.raises(RegistryError) as ei:
        registry.resolve(PageName.PROJECT_DETAIL).url("http://app.test")
    assert "project_id" in str(ei.value)


def test_descriptor_is_immutable() -> None:
    desc = registry.resolve(PageName.LOGIN)
    with pytest.raises(ValidationError):
        desc.title = "Other"  # type: ignore[misc]


def test_url_template_must_be_a_path() -> None:
    with pytest.raises(ValidationError):
        PageDescriptor(name=PageName.LOGIN, title="Login", url_template="login")


def test_unknown_name_is_rejected_by_the_enum() -> None:
    with pytest.raises(ValidationError):
        PageDescriptor(name="settings", title="Settings", url_template="/settings")


def test_registry_must_be_exhaustive() -> None:
    table = [PageDescriptor(name=PageName.LOGIN, title="Login", url_template="/login")]
    with pytest.raises(RegistryError) as ei:
        PageRegistry(table)
    assert ei.value.details["missing"] == ["projectList", "projectDetail"]


def test_registry_rejects_duplicates() -> None:
    table = list(registry.REGISTRY) + [
        PageDescriptor(name=PageName.LOGIN, title="Login again", url_template="/signin")
    ]
    with pytest.raises(RegistryError):
        PageRegistry(table)


def test_registry_has_no_mutation_api() -> None:
    reg = registry.REGISTRY
    assert len(reg) == len(PageName)
    assert PageName.LOGIN in reg
    assert not hasattr(reg, "register")
    with pytest.raises(TypeError):
        reg._entries[PageName.LOGIN] = None  # type: ignore[index]
