"""Chart payload rendering helpers.

The engine in `analysis` produces positional series and tick plans; this
package turns them into JSON payloads consumed by the dashboard's charting
library.
"""
