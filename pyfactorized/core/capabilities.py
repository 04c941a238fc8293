"""
Operation name constants for pyfactorized.

This module is the SINGLE SOURCE OF TRUTH for backend operation names.
Import from here, never use raw strings.

Usage:
    from pyfactorized.core.capabilities import OP_ROW_SUM, OP_TRANSPOSE

    if adapter.supports(OP_ROW_SUM):
        sums = adapter.invoke(OP_ROW_SUM, matrix)
"""

# Dimension queries (return int)
OP_NUM_ROWS = 'num_rows'
OP_NUM_COLS = 'num_cols'

# Structural operations
OP_TRANSPOSE = 'transpose'
OP_DIAGONAL = 'diagonal'
OP_SLICE = 'slice'
OP_ROW_APPEND = 'row_append'
OP_COLUMN_APPEND = 'column_append'
OP_INVERT = 'invert'

# Scalar and elementwise maps
OP_SCALAR_ADD = 'scalar_add'
OP_SCALAR_MULTIPLY = 'scalar_multiply'
OP_SCALAR_EXPONENT = 'scalar_exponent'
OP_ELEMENTWISE_EXP = 'elementwise_exp'
OP_ELEMENTWISE_LOG = 'elementwise_log'
OP_ELEMENTWISE_SQRT = 'elementwise_sqrt'

# Reductions
OP_ROW_SUM = 'row_sum'
OP_COLUMN_SUM = 'column_sum'
OP_ELEMENT_WISE_SUM = 'element_wise_sum'

# Products
OP_CROSS_PRODUCT = 'cross_product'
OP_CROSS_PRODUCT_OF = 'cross_product_of'
OP_MATRIX_ADD = 'matrix_add'
OP_LEFT_MULTIPLY = 'left_multiply'
OP_RIGHT_MULTIPLY = 'right_multiply'

# Operations whose result must be an integer
INTEGER_OPERATIONS = frozenset({
    OP_NUM_ROWS,
    OP_NUM_COLS,
})

# Operations whose result must be a real number
REAL_OPERATIONS = frozenset({
    OP_ELEMENT_WISE_SUM,
})

# Full backend capability surface, bound by BackendAdapter
ALL_OPERATIONS = frozenset({
    OP_NUM_ROWS,
    OP_NUM_COLS,
    OP_TRANSPOSE,
    OP_DIAGONAL,
    OP_SLICE,
    OP_ROW_APPEND,
    OP_COLUMN_APPEND,
    OP_INVERT,
    OP_SCALAR_ADD,
    OP_SCALAR_MULTIPLY,
    OP_SCALAR_EXPONENT,
    OP_ELEMENTWISE_EXP,
    OP_ELEMENTWISE_LOG,
    OP_ELEMENTWISE_SQRT,
    OP_ROW_SUM,
    OP_COLUMN_SUM,
    OP_ELEMENT_WISE_SUM,
    OP_CROSS_PRODUCT,
    OP_CROSS_PRODUCT_OF,
    OP_MATRIX_ADD,
    OP_LEFT_MULTIPLY,
    OP_RIGHT_MULTIPLY,
})

__all__ = [
    'OP_NUM_ROWS',
    'OP_NUM_COLS',
    'OP_TRANSPOSE',
    'OP_DIAGONAL',
    'OP_SLICE',
    'OP_ROW_APPEND',
    'OP_COLUMN_APPEND',
    'OP_INVERT',
    'OP_SCALAR_ADD',
    'OP_SCALAR_MULTIPLY',
    'OP_SCALAR_EXPONENT',
    'OP_ELEMENTWISE_EXP',
    'OP_ELEMENTWISE_LOG',
    'OP_ELEMENTWISE_SQRT',
    'OP_ROW_SUM',
    'OP_COLUMN_SUM',
    'OP_ELEMENT_WISE_SUM',
    'OP_CROSS_PRODUCT',
    'OP_CROSS_PRODUCT_OF',
    'OP_MATRIX_ADD',
    'OP_LEFT_MULTIPLY',
    'OP_RIGHT_MULTIPLY',
    'INTEGER_OPERATIONS',
    'REAL_OPERATIONS',
    'ALL_OPERATIONS',
]
