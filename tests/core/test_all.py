import pytest
from pydantic import ValidationError

from uniforge.core import (
    Component,
    Context,
    Loader,
    NCall,
    Operation,
    Provider,
    Response,
    Time,
    YamlLoader,
    operation,
)
from uniforge.core.exceptions import (
    ConfigurationError,
    LoadError,
    NotFoundError,
    ProviderCallError,
)


class Greeter(Component):
    @operation()
    def greet(self, name: str, excited: bool = False) -> Response[str]:
        return Response(result="nobody home")


class Polite(Provider):
    def greet(self, name: str, excited: bool = False) -> Response[str]:
        return Response(result=f"hello {name}{'!' if excited else ''}")


class Silent(Provider):
    pass


def test_operation_dispatches_to_provider():
    greeter = Greeter(__provider__=Polite())
    assert greeter.greet("ops").result == "hello ops"
    assert greeter.greet(name="ops", excited=True).result == "hello ops!"
    assert greeter.__supports__("greet")


def test_operation_falls_back_to_component_body():
    greeter = Greeter(__provider__=Silent())
    assert not greeter.__supports__("greet")
    assert greeter.greet("ops").result == "nobody home"


def test_operation_converts_provider_args():
    class Counter(Provider):
        def count(self, n: int) -> Response[int]:
            return Response(result=n + 1)

    provider = Counter()
    res = provider.__run__(Operation(name="count", args={"n": "41"}))
    assert res.result == 42


def test_operation_normalize_drops_none():
    op = Operation.normalize("delete", {"self": object(), "key": None, "name": "x"})
    assert op.name == "delete"
    assert op.args == {"name": "x"}


def test_ncall_maps_errors():
    def fail():
        raise KeyError("missing")

    with pytest.raises(ProviderCallError) as e:
        NCall(fail, None, None, {KeyError: ProviderCallError}).invoke()
    assert isinstance(e.value.__cause__, KeyError)
    assert "fail" in str(e.value)

    assert NCall(fail, None, None, {KeyError: None}).invoke() is None

    with pytest.raises(NotFoundError):
        NCall(fail, None, None, {KeyError: NotFoundError("gone")}).invoke()

    with pytest.raises(KeyError):
        NCall(fail, None, None, {ValueError: ProviderCallError}).invoke()


def test_ncall_passes_args():
    def add(a, b):
        return a + b

    assert NCall(add, {"a": 1}, {"b": 2}).invoke() == 3
    assert NCall(add, [1, 2]).invoke() == 3


def test_context_is_frozen():
    ctx = Context(config="c", data={"platform": "onprem"})
    assert ctx.get("platform") == "onprem"
    assert ctx.get("missing", "x") == "x"
    assert Context().get("platform") is None
    assert ctx.id != Context().id
    with pytest.raises(ValidationError):
        ctx.config = "other"


def test_loader_errors():
    with pytest.raises(LoadError):
        Loader.load_class("uniforge.core.missing_module", Provider)
    with pytest.raises(LoadError):
        Loader.load_class("uniforge.core.time", Provider)


def test_component_binds_provider_by_type():
    from uniforge.compute.hypervisor import Hypervisor
    from uniforge.compute.hypervisor.providers.qemu import Qemu

    hypervisor = Hypervisor(
        __provider__=dict(type="qemu", parameters=dict(memory="1G"))
    )
    assert isinstance(hypervisor.provider, Qemu)
    assert hypervisor.provider.memory == "1G"

    with pytest.raises(LoadError):
        Hypervisor(__provider__="missing")


def test_yaml_loader(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("CloudConfig:\n  Platform: aws\n")
    assert YamlLoader.load(str(path)) == {"CloudConfig": {"Platform": "aws"}}

    path.write_text("")
    assert YamlLoader.load(str(path)) == {}

    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigurationError):
        YamlLoader.load(str(path))

    path.write_text("a: [b\n")
    with pytest.raises(ConfigurationError):
        YamlLoader.load(str(path))

    with pytest.raises(ConfigurationError):
        YamlLoader.load(str(tmp_path / "missing.yaml"))


def test_now_ns_never_repeats(monkeypatch):
    monkeypatch.setattr("time.time_ns", lambda: 1_000)
    first = Time.now_ns()
    second = Time.now_ns()
    assert second > first

    monkeypatch.setattr("time.time_ns", lambda: 10)
    assert Time.now_ns() > second
