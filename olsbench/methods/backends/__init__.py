"""
Coefficient method implementations.

Submodules:
    dense: numpy/scipy methods on the default C-ordered ndarray
    matrix_class: the same algebra on column-major and sparse storage
    jit: numba-compiled single-pass closure
"""
