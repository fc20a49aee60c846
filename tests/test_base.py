import pytest

from rbacroles.base import AbstractConditionalRoleManager, AbstractRoleManager

ROLE_MANAGER_METHODS = frozenset(
    {
        "clear",
        "add_link",
        "delete_link",
        "has_link",
        "get_roles",
        "get_users",
        "get_domains",
        "get_all_domains",
        "print_roles",
        "set_logger",
        "match",
        "add_matching_func",
        "add_domain_matching_func",
        "delete_domain",
    }
)

CONDITIONAL_METHODS = frozenset(
    {
        "add_link_condition_func",
        "set_link_condition_func_params",
        "add_domain_link_condition_func",
        "set_domain_link_condition_func_params",
    }
)

ALL_CONDITIONAL_METHODS = ROLE_MANAGER_METHODS | CONDITIONAL_METHODS


def _stub(method_name):
    def method(self, *args, **kwargs):
        return (method_name, args)

    method.__name__ = method_name
    return method


def _subclass(base, names):
    return type("Impl", (base,), {name: _stub(name) for name in names})


def test_role_manager_base_cannot_be_instantiated():
    with pytest.raises(TypeError, match="has_link"):
        AbstractRoleManager()


def test_conditional_base_cannot_be_instantiated():
    with pytest.raises(TypeError, match="add_link_condition_func"):
        AbstractConditionalRoleManager()


@pytest.mark.parametrize(
    "base,names,call",
    [
        (AbstractRoleManager, ROLE_MANAGER_METHODS, ("has_link", ("u1", "g1", "domain1"))),
        (
            AbstractConditionalRoleManager,
            ALL_CONDITIONAL_METHODS,
            ("set_link_condition_func_params", ("u", "r", "p1")),
        ),
    ],
)
def test_complete_subclass_instantiates(base, names, call):
    manager = _subclass(base, names)()
    assert isinstance(manager, AbstractRoleManager)
    method_name, args = call
    assert getattr(manager, method_name)(*args) == call
    # Subclassing leaves the base itself abstract.
    with pytest.raises(TypeError, match=method_name):
        base()


@pytest.mark.parametrize("missing", sorted(ROLE_MANAGER_METHODS))
def test_every_role_manager_method_is_required(missing):
    cls = _subclass(AbstractRoleManager, ROLE_MANAGER_METHODS - {missing})
    with pytest.raises(TypeError, match=missing):
        cls()
    with pytest.raises(TypeError, match=missing):
        AbstractRoleManager()


@pytest.mark.parametrize("missing", sorted(ALL_CONDITIONAL_METHODS))
def test_every_conditional_method_is_required(missing):
    cls = _subclass(AbstractConditionalRoleManager, ALL_CONDITIONAL_METHODS - {missing})
    with pytest.raises(TypeError, match=missing):
        cls()
    with pytest.raises(TypeError, match=missing):
        AbstractConditionalRoleManager()


def test_partial_subclass_is_still_abstract():
    class Partial(AbstractRoleManager):
        def clear(self):
            return "cleared"

    with pytest.raises(TypeError):
        Partial()

    completed = _subclass(Partial, ROLE_MANAGER_METHODS - {"clear"})()
    assert completed.clear() == "cleared"
    assert completed.get_all_domains() == ("get_all_domains", ())
    with pytest.raises(TypeError, match="clear"):
        AbstractRoleManager()