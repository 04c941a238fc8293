"""
Tests for the backend adapter.

Validates:
    - Operations are bound once from the handle
    - Missing operations and boundary type errors surface as
      BackendIncompatibleError with the cause chained
    - Dimension queries and element_wise_sum check their result kind
    - Numeric errors inside the backend propagate unchanged
"""

import logging

import numpy as np
import pytest

from pyfactorized.backends import BackendAdapter, CPUMatrixBackend
from pyfactorized.core.capabilities import ALL_OPERATIONS
from pyfactorized.core.exceptions import BackendIncompatibleError
from pyfactorized.core.protocols import MatrixBackend


class PartialBackend:
    """Only answers dimension queries and transpose."""

    name = 'partial'

    def num_rows(self, a):
        return a.shape[0]

    def num_cols(self, a):
        return a.shape[1]

    def transpose(self, a):
        return a.T


class BrokenResultBackend(CPUMatrixBackend):
    """Returns the wrong kind of value from typed operations."""

    def __init__(self, rows=2.5, total="12"):
        self._rows = rows
        self._total = total

    @property
    def name(self):
        return 'broken'

    def num_rows(self, a):
        return self._rows

    def element_wise_sum(self, a):
        return self._total


class TestBinding:

    def test_cpu_backend_binds_everything(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        assert all(adapter.supports(op) for op in ALL_OPERATIONS)
        assert adapter.name == 'cpu_numpy'

    def test_cpu_backend_satisfies_protocol(self):
        assert isinstance(CPUMatrixBackend(), MatrixBackend)

    def test_partial_backend_binds(self):
        adapter = BackendAdapter(PartialBackend())
        assert adapter.supports('transpose')
        assert not adapter.supports('row_sum')

    def test_unknown_operation_not_supported(self):
        assert not BackendAdapter(CPUMatrixBackend()).supports('frobnicate')

    def test_wrapping_adapter_unwraps(self):
        handle = CPUMatrixBackend()
        adapter = BackendAdapter(BackendAdapter(handle))
        assert adapter.handle is handle

    def test_name_falls_back_to_type(self):
        class Anonymous:
            pass
        assert BackendAdapter(Anonymous()).name == 'Anonymous'

    def test_missing_operations_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='pyfactorized.backends.adapter'):
            BackendAdapter(PartialBackend())
        assert any('row_sum' in r.getMessage() for r in caplog.records)


class TestBoundaryErrors:

    def test_missing_operation(self):
        adapter = BackendAdapter(PartialBackend())
        with pytest.raises(BackendIncompatibleError) as exc_info:
            adapter.row_sum(np.ones((2, 2)))
        assert exc_info.value.operation == 'row_sum'
        assert exc_info.value.backend_name == 'partial'

    def test_wrong_arity_is_wrapped(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        with pytest.raises(BackendIncompatibleError) as exc_info:
            adapter.invoke('transpose', np.ones((2, 2)), np.ones((2, 2)))
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_attribute_error_is_wrapped(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        with pytest.raises(BackendIncompatibleError) as exc_info:
            adapter.num_rows("not a matrix")
        assert isinstance(exc_info.value.__cause__, AttributeError)

    def test_value_error_propagates(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        with pytest.raises(ValueError):
            adapter.right_multiply(np.ones((2, 3)), np.ones((2, 3)))

    def test_unknown_name_via_invoke(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        with pytest.raises(BackendIncompatibleError):
            adapter.invoke('frobnicate', np.ones((2, 2)))

    def test_failure_logged_at_debug(self, caplog):
        adapter = BackendAdapter(PartialBackend())
        with caplog.at_level(logging.DEBUG, logger='pyfactorized.backends.adapter'):
            with pytest.raises(BackendIncompatibleError):
                adapter.column_sum(np.ones((2, 2)))
        assert any('column_sum' in r.getMessage() for r in caplog.records)


class TestResultKinds:

    def test_non_integer_rows_rejected(self):
        adapter = BackendAdapter(BrokenResultBackend(rows=2.5))
        with pytest.raises(BackendIncompatibleError, match="num_rows"):
            adapter.num_rows(np.ones((2, 2)))

    def test_bool_rows_rejected(self):
        adapter = BackendAdapter(BrokenResultBackend(rows=True))
        with pytest.raises(BackendIncompatibleError):
            adapter.num_rows(np.ones((2, 2)))

    def test_out_of_range_rows_rejected(self):
        adapter = BackendAdapter(BrokenResultBackend(rows=2 ** 63))
        with pytest.raises(BackendIncompatibleError):
            adapter.num_rows(np.ones((2, 2)))

    def test_integral_float_rows_accepted(self):
        adapter = BackendAdapter(BrokenResultBackend(rows=4.0))
        result = adapter.num_rows(np.ones((2, 2)))
        assert result == 4
        assert isinstance(result, int)

    def test_numpy_integer_rows_accepted(self):
        adapter = BackendAdapter(BrokenResultBackend(rows=np.int64(7)))
        assert adapter.num_rows(np.ones((2, 2))) == 7

    def test_string_sum_rejected(self):
        adapter = BackendAdapter(BrokenResultBackend(total="12"))
        with pytest.raises(BackendIncompatibleError, match="element_wise_sum"):
            adapter.element_wise_sum(np.ones((2, 2)))

    def test_bool_sum_rejected(self):
        adapter = BackendAdapter(BrokenResultBackend(total=False))
        with pytest.raises(BackendIncompatibleError):
            adapter.element_wise_sum(np.ones((2, 2)))

    def test_numpy_float_sum_accepted(self):
        adapter = BackendAdapter(BrokenResultBackend(total=np.float32(1.5)))
        assert adapter.element_wise_sum(np.ones((2, 2))) == 1.5


class TestInvoke:
    """invoke() routes by name with the same checks as the typed methods."""

    def test_invoke_row_sum(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        result = adapter.invoke('row_sum', np.eye(3))
        np.testing.assert_array_equal(result, np.ones((3, 1)))

    def test_invoke_integer_operation(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        assert adapter.invoke('num_cols', np.ones((2, 5))) == 5

    def test_invoke_integer_operation_checks_result(self):
        adapter = BackendAdapter(BrokenResultBackend(rows=1.5))
        with pytest.raises(BackendIncompatibleError):
            adapter.invoke('num_rows', np.ones((2, 2)))

    def test_invoke_real_operation(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        assert adapter.invoke('element_wise_sum', np.ones((2, 3))) == 6.0

    def test_invoke_slice(self):
        adapter = BackendAdapter(CPUMatrixBackend())
        x = np.arange(12.0).reshape(3, 4)
        np.testing.assert_array_equal(adapter.invoke('slice', x, 1, 3, 0, 2), x[1:3, 0:2])
