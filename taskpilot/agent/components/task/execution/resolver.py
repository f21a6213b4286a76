"""Variable reference resolution for step parameters.

A string value starting with the sigil (``$`` by default) names a variable in
the ExecutionContext, e.g. ``$step.step_1.result``. The remainder after the
sigil is looked up verbatim; unknown names are left as the literal string.

Nested dictionaries are resolved field by field. Lists are passed through
untouched, so references inside lists are not resolved.
"""

from typing import Any, Dict

from .models import ExecutionContext

VARIABLE_SIGIL = "$"


def resolve_parameters(
    params: Dict[str, Any],
    context: ExecutionContext,
    sigil: str = VARIABLE_SIGIL,
) -> Dict[str, Any]:
    """Return a new parameter map with variable references substituted.

    Neither ``params`` nor ``context`` is modified. Resolved values are
    inserted as-is; an object stored under a variable is not searched for
    further references.
    """
    return {key: _resolve_value(value, context, sigil) for key, value in params.items()}


def _resolve_value(value: Any, context: ExecutionContext, sigil: str) -> Any:
    if isinstance(value, str) and value.startswith(sigil):
        path = value[len(sigil):]
        if path in context.variables:
            return context.variables[path]
        return value

    if isinstance(value, dict):
        return resolve_parameters(value, context, sigil)

    return value
