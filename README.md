# rbacroles

Role managers for role-based access control. They record who inherits
which role and answer questions such as "does `alice` have `admin`?".

The package has these modules:

- `rbacroles.base` defines the abstract interfaces `AbstractRoleManager` and
  `AbstractConditionalRoleManager`. It also defines the type aliases
  `MatchingFunc` and `LinkConditionFunc`.
- `rbacroles.role_manager` contains `Role`, a node in the role graph, and
  `RoleManagerImpl`, a role manager without domains.
- `rbacroles.domain_manager` contains `DomainManager`, which keeps a separate
  role graph for each domain. `RoleManager` is a subclass of it with the
  same behaviour.
- `rbacroles.conditional` contains `ConditionalRoleManager` and
  `ConditionalDomainManager`. In these managers a link holds only while the
  condition function attached to it returns true.

The package has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Basic use

```python
from rbacroles.role_manager import RoleManagerImpl

rm = RoleManagerImpl(10)  # how many levels of inheritance has_link searches
rm.add_link("alice", "editor")
rm.add_link("editor", "admin")

rm.has_link("alice", "admin")  # True
rm.get_roles("alice")          # ["editor"]
rm.get_users("editor")         # ["alice"]

rm.delete_link("editor", "admin")
rm.has_link("alice", "admin")  # False

list(rm.links())               # [("alice", "editor")]
```

`has_link` stops after it has searched `max_hierarchy_level` levels.
A name always has a link to itself.

`get_roles` and `get_users` list only direct links, and links that come
through pattern matches. Looking up a name that is not stored leaves
nothing behind.

`RoleManagerImpl` has no domains:

- Any domain arguments you pass are ignored.
- `get_domains` and `get_all_domains` both return `[""]`.
- `delete_domain` raises `RuntimeError`.

## Pattern matching

`add_matching_func(name, fn)` takes a function `fn(name, pattern) -> bool`.
After it is set, stored role names also act as patterns, and the existing
links are rebuilt so that they take the function into account.

```python
import re
from rbacroles.role_manager import RoleManagerImpl

def regex_match(name, pattern):
    return re.search(pattern, name) is not None

rm = RoleManagerImpl(10)
rm.add_matching_func("regexMatch", regex_match)
rm.add_link(r"u\d+", "user")
rm.has_link("u42", "user")  # True
```

`match(name, pattern)` is true when the two strings are equal. Otherwise it
returns what the matching function returns, or false if no function is set.

## Domains

`DomainManager` takes the domain as the first optional positional argument
of `add_link`, `delete_link`, `has_link`, `get_roles` and `get_users`. When
that argument is left out, the empty default domain is used.

```python
from rbacroles.domain_manager import DomainManager

dm = DomainManager(10)
dm.add_link("alice", "admin", "domain1")
dm.add_link("bob", "admin", "domain2")

dm.has_link("alice", "admin", "domain1")  # True
dm.has_link("alice", "admin", "domain2")  # False
sorted(dm.get_all_domains())              # ["domain1", "domain2"]
dm.get_domains("bob")                     # ["domain2"]

dm.delete_domain("domain2")
sorted(dm.get_all_domains())              # ["domain1"]
```

Setting `add_matching_func` on a `DomainManager` passes the function on to
every per-domain graph, including graphs created later.

`add_domain_matching_func(name, fn)` lets domain names act as patterns:

- A link added in a pattern domain such as `*` is also added to every stored
  domain that `fn` matches against that pattern.
- A domain graph created later copies the links of every pattern domain it
  matches.
- Setting the function rebuilds all stored links.

## Conditional links

```python
from rbacroles.conditional import ConditionalRoleManager

def within_hours(start, end):
    return start <= "10:00" <= end

crm = ConditionalRoleManager(10)
crm.add_link("alice", "oncall")
crm.add_link_condition_func("alice", "oncall", within_hours)
crm.set_link_condition_func_params("alice", "oncall", "09:00", "17:00")

crm.has_link("alice", "oncall")                         # True
crm.get_link_condition_func_params("alice", "oncall")   # ["09:00", "17:00"]
```

The condition function is called with the stored parameters as positional
strings. A link that has no condition always holds. If the function raises,
the error is logged at ERROR level and the link is treated as absent.

`add_domain_link_condition_func` and `set_domain_link_condition_func_params`
attach a condition to a link within a named domain. The domain given to
`has_link` chooses which conditions apply to the first step of the search.
Later steps use the conditions of the default domain.

`get_link_condition_func` and `get_domain_link_condition_func` return the
stored function, or `None` if there is none or either name is unknown.

`ConditionalDomainManager` combines domains with conditional links. Its
condition and parameter setters apply to every domain graph that already
exists, so add the links before you attach conditions to them.

## Logging

Each manager logs to the `rbacroles` logger by default. `set_logger`
replaces that logger.

`print_roles()` writes all role links to the logger at INFO level. It does
nothing when the logger does not have INFO enabled.

## What this package does not do

This package only keeps role inheritance and answers questions about it.
It does not:

- read models or policy files,
- store policies,
- decide whether an access request is allowed.

All data lives in memory and is lost when the process ends.