"""SQL fragment for atomic add-to-set / pull-all on text[] columns."""

# Union the first parameter into the column, then pull the second one,
# keeping first-seen order. Bind as (add, remove).
#
# The expression reads the column inside the same UPDATE that writes it, so
# the row lock serializes concurrent editors and each one applies its delta
# to the other's committed array. Disjoint edits from two callers both land.
# Callers must never read the set, merge in Python, and write it back.
SET_MUTATION_SQL = (
    "ARRAY("
    "SELECT t.v FROM unnest({column} || %s::text[]) WITH ORDINALITY AS t(v, n) "
    "WHERE NOT (t.v = ANY(%s::text[])) "
    "GROUP BY t.v ORDER BY min(t.n)"
    ")"
)


def set_mutation(column: str) -> str:
    """Return the add/pull expression for `column`."""
    return SET_MUTATION_SQL.format(column=column)
