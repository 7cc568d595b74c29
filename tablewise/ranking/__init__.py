"""
Preference-aware ranking.

Responsibilities:
- Filter a candidate list by free-text and price-tier queries.
- Score each remaining candidate from the learned category and price weights.
- Return a stable, descending-score ordering that keeps the input order on ties.
- Debounce search input before it reaches the filter-then-rank pass.
"""
