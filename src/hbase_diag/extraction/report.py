"""Message templates for the extraction summary."""

REPORT_HEADER = """
# HBase Usage Extraction
"""

REPORT_SECTION_RESOURCES = """
## Resolved tables
Resolved {count} table(s) from {subject}(s) {names}:
{tables}
"""

REPORT_SECTION_COLLECTION = """
## Collection
Master: {base_url}

Collected {ok} of {total} artifacts into `{destination}`.
"""

REPORT_SECTION_FAILURES = """
**Failed artifacts:**
{failures}
"""

REPORT_NO_ENDPOINT = """
## Collection
The HBase master could not be located; nothing was collected.
"""
