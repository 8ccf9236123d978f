"""Name derivation for generated TypeScript.

All helpers are pure string functions. Namespaces are posix paths
("events/voting") as produced by the scanner.
"""

from __future__ import annotations

import re

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_$]+")
_CAMEL_SPLIT_RE = re.compile(r"[^A-Za-z0-9$]+")


def capitalize(s: str) -> str:
    """Uppercase the first character only ("getById" -> "GetById")."""
    return s[:1].upper() + s[1:]


def is_valid_identifier(s: str) -> bool:
    return bool(_IDENTIFIER_RE.match(s))


def safe_identifier(s: str) -> str:
    """Join runs separated by non-identifier characters ("my-module" -> "myModule")."""
    parts = [p for p in _NON_IDENTIFIER_RE.split(s) if p]
    if not parts:
        return ""
    return parts[0] + "".join(capitalize(p) for p in parts[1:])


def to_camel_case(s: str) -> str:
    """Capitalize and join path and snake segments ("voting/config" -> "VotingConfig")."""
    return "".join(capitalize(p) for p in _CAMEL_SPLIT_RE.split(s) if p)


def to_pascal_case(s: str) -> str:
    """PascalCase a table or module name ("user_profiles" -> "UserProfiles")."""
    if "_" in s:
        return "".join(capitalize(p) for p in s.split("_"))
    return capitalize(s)


def to_natural_language(name: str) -> str:
    """Split camelCase into lowercase words ("getEventCheckInList" -> "get event check in list")."""
    out: list[str] = []
    for i, ch in enumerate(name):
        if i > 0 and "A" <= ch <= "Z":
            out.append(" ")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def to_singular(name: str) -> str:
    """Suffix-based singular form of a table name."""
    if name.endswith("ies"):
        return name[:-3] + "y"  # categories -> category
    if name.endswith("ses"):
        return name[:-2]  # addresses -> address
    if name.endswith("s") and not name.endswith("ss"):
        return name[:-1]  # projects -> project
    return name


def api_path(namespace: str, function_name: str) -> str:
    """Reference-object path: `api.events.voting.getById`.

    Segments that are not valid identifiers use bracket access:
    `api["my-module"].list`.
    """
    out = "api"
    for segment in [*namespace.split("/"), function_name]:
        if is_valid_identifier(segment):
            out += f".{segment}"
        else:
            out += f'["{segment}"]'
    return out


def top_level_namespace(namespace: str) -> str:
    return namespace.split("/", 1)[0]


def sub_namespace(namespace: str) -> str:
    parts = namespace.split("/", 1)
    return parts[1] if len(parts) > 1 else ""


# =============================================================================
# Hooks
# =============================================================================


def hook_base_name(top: str, function_name: str) -> str:
    """Unqualified hook name: `use<Top><Fn>`."""
    return f"use{capitalize(safe_identifier(top))}{capitalize(function_name)}"


def qualified_hook_name(top: str, sub: str, function_name: str) -> str:
    """Hook name qualified with its sub-namespace: `use<Top><Sub><Fn>`.

    Falls back to the base name when there is no distinct sub-namespace.
    """
    if not sub or sub == top:
        return hook_base_name(top, function_name)
    return (
        f"use{capitalize(safe_identifier(top))}{capitalize(to_camel_case(sub))}"
        f"{capitalize(function_name)}"
    )


def grouped_hook_file_name(top: str) -> str:
    return "use" + capitalize(safe_identifier(top))


def split_hook_file_name(namespace: str) -> str:
    """"events/voting" -> "useEvents_voting"."""
    return "use" + "_".join(capitalize(p) for p in namespace.split("/"))


def section_label(sub: str, kind_plural: str) -> str:
    """Section banner used inside grouped hook files."""
    return f"// ============= {to_camel_case(sub).upper()} {kind_plural.upper()} ============="


# =============================================================================
# API references
# =============================================================================


def grouped_api_file_name(top: str) -> str:
    return top


def split_api_file_name(namespace: str) -> str:
    """"events/voting" -> "events-voting"."""
    return namespace.replace("/", "-")


def grouped_api_export_base(top: str) -> str:
    return capitalize(safe_identifier(top))


def split_api_export_base(namespace: str) -> str:
    """"events/voting" -> "EventsVoting"."""
    return "".join(capitalize(safe_identifier(p)) for p in namespace.split("/"))


def collision_prefix(namespace: str, top: str) -> str:
    """First sub-namespace segment with Queries/Mutations/Actions stripped.

    "shop/appointmentSettingsQueries" -> "appointmentSettings"
    """
    sub = namespace[len(top) + 1 :] if namespace.startswith(top + "/") else ""
    if not sub:
        return ""
    prefix = sub.split("/", 1)[0]
    for suffix in ("Queries", "Mutations", "Actions"):
        prefix = prefix.removesuffix(suffix)
    return safe_identifier(prefix)
