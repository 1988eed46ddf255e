from typing import Dict, Set, Type
import enum
from credcheck.exceptions import StateError, ValidationError


def parse_enum(enum_class: Type[enum.Enum], value, field: str = 'status'):
    """Map a client-supplied string onto an enum member"""
    try:
        return enum_class(value)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_class)
        raise ValidationError(f"Invalid {field} '{value}'. Must be one of: {allowed}")


def ensure_transition(table: Dict[enum.Enum, Set[enum.Enum]], current, target, entity: str):
    """Raise StateError unless current -> target is in the transition table"""
    if target not in table.get(current, set()):
        raise StateError(
            f"Cannot move {entity} from '{current.value}' to '{target.value}'"
        )
