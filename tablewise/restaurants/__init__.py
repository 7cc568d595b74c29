"""
Restaurant and reservation candidate source.

Responsibilities:
- Load the restaurant and reservation seed data with pandas.
- Hand the ranking layer candidates in their upstream order.
- Assemble ranked listings ready for API serialisation.
"""
