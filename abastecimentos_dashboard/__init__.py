"""
Abastecimentos — Fuel Station Refueling Dashboard

Analytics backend that turns loosely structured refueling and employee
exports into a consistent record set grouped by attendant.

Pipeline:
    loaders.parse_refuelings / loaders.parse_employees
        -> transforms.merge_directory (card id upsert)
        -> dashboard.get_refueling_overview (filter, sort, group, paginate)

To connect a front end:
    Keep a snapshot from state.empty_state(), thread it through
    state.import_refuelings / state.import_employees / state.bulk_delete, and
    call dashboard.get_refueling_overview with the current filters to get a
    plain dict for rendering.

To support a new export layout:
    Add a rule to config.REFUELING_FIELD_RULES for the field whose column
    name or position differs. Rules are tried in order.
"""
