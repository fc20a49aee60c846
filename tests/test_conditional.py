import logging

from rbacroles.conditional import ConditionalDomainManager, ConditionalRoleManager


def flag_is_yes(*params):
    return params == ("yes",)


def test_link_without_condition_holds():
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")
    assert crm.has_link("alice", "admin") is True
    assert crm.get_link_condition_func("alice", "admin") is None


def test_condition_controls_link():
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")
    crm.add_link_condition_func("alice", "admin", flag_is_yes)
    crm.set_link_condition_func_params("alice", "admin", "yes")
    assert crm.has_link("alice", "admin") is True
    crm.set_link_condition_func_params("alice", "admin", "no")
    assert crm.has_link("alice", "admin") is False


def test_condition_getters_return_what_was_set():
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")
    crm.add_link_condition_func("alice", "admin", flag_is_yes)
    crm.set_link_condition_func_params("alice", "admin", "yes", "extra")
    assert crm.get_link_condition_func("alice", "admin") is flag_is_yes
    assert crm.get_link_condition_func_params("alice", "admin") == ["yes", "extra"]
    assert crm.get_link_condition_func_params("alice", "admin", "d1") is None


def test_getters_for_unknown_roles_leave_no_trace():
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")
    assert crm.get_link_condition_func("ghost", "admin") is None
    assert crm.get_domain_link_condition_func("alice", "ghost", "d1") is None
    assert crm.get_link_condition_func_params("ghost", "phantom") is None
    assert list(crm.links()) == [("alice", "admin")]


def test_condition_blocks_deeper_path():
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")
    crm.add_link("admin", "root")
    assert crm.has_link("alice", "root") is True
    crm.add_link_condition_func("admin", "root", lambda: False)
    assert crm.has_link("alice", "root") is False
    assert crm.has_link("alice", "admin") is True


def test_failing_condition_is_logged_and_link_fails(caplog):
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")

    def broken(*params):
        raise ValueError("boom")

    crm.add_link_condition_func("alice", "admin", broken)
    assert crm.has_link("alice", "admin") is False
    assert "boom" in caplog.text


def test_domain_condition_used_only_with_that_domain():
    crm = ConditionalRoleManager(10)
    crm.add_link("alice", "admin")
    crm.add_domain_link_condition_func("alice", "admin", "d1", flag_is_yes)
    crm.set_domain_link_condition_func_params("alice", "admin", "d1", "no")
    assert crm.has_link("alice", "admin", "d1") is False
    assert crm.has_link("alice", "admin") is True
    assert crm.has_link("alice", "admin", "d2") is True
    assert crm.get_domain_link_condition_func("alice", "admin", "d1") is flag_is_yes
    assert crm.get_link_condition_func_params("alice", "admin", "d1") == ["no"]


def test_domain_manager_keeps_domains_apart():
    cdm = ConditionalDomainManager(10)
    cdm.add_link("alice", "admin", "d1")
    cdm.add_link("bob", "admin", "d2")
    assert cdm.has_link("alice", "admin", "d1") is True
    assert cdm.has_link("alice", "admin", "d2") is False
    assert cdm.get_roles("bob", "d2") == ["admin"]
    assert sorted(cdm.get_all_domains()) == ["d1", "d2"]
    cdm.delete_link("alice", "admin", "d1")
    assert cdm.has_link("alice", "admin", "d1") is False


def test_domain_manager_domain_condition():
    cdm = ConditionalDomainManager(10)
    cdm.add_link("alice", "admin", "d1")
    cdm.add_link("alice", "admin", "d2")
    cdm.add_domain_link_condition_func("alice", "admin", "d1", flag_is_yes)
    cdm.set_domain_link_condition_func_params("alice", "admin", "d1", "no")
    assert cdm.has_link("alice", "admin", "d1") is False
    assert cdm.has_link("alice", "admin", "d2") is True
    cdm.set_domain_link_condition_func_params("alice", "admin", "d1", "yes")
    assert cdm.has_link("alice", "admin", "d1") is True


def test_domain_manager_default_condition():
    cdm = ConditionalDomainManager(10)
    cdm.add_link("alice", "admin")
    cdm.add_link("alice", "admin", "d1")
    cdm.add_link_condition_func("alice", "admin", flag_is_yes)
    cdm.set_link_condition_func_params("alice", "admin", "no")
    assert cdm.has_link("alice", "admin") is False
    assert cdm.has_link("alice", "admin", "d1") is True
    cdm.set_link_condition_func_params("alice", "admin", "yes")
    assert cdm.has_link("alice", "admin") is True


def test_conditions_apply_only_to_existing_domains():
    cdm = ConditionalDomainManager(10)
    cdm.add_link("alice", "admin")
    cdm.add_link_condition_func("alice", "admin", lambda: False)
    cdm.add_link("alice", "admin", "later")
    assert cdm.has_link("alice", "admin") is False
    assert cdm.has_link("alice", "admin", "later") is True


def test_domain_manager_error_is_logged(caplog):
    caplog.set_level(logging.ERROR)
    cdm = ConditionalDomainManager(10)
    cdm.add_link("alice", "admin", "d1")

    def broken(*params):
        raise RuntimeError("condition failed")

    cdm.add_domain_link_condition_func("alice", "admin", "d1", broken)
    assert cdm.has_link("alice", "admin", "d1") is False
    assert "condition failed" in caplog.text