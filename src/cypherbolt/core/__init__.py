"""Statement compilation and execution."""

from cypherbolt.core.batch import compile_batch_create, compile_batch_delete, compile_batch_update
from cypherbolt.core.compiler import (
    CompileOptions,
    OperationKind,
    Statement,
    compile_create,
    compile_delete,
    compile_statement,
    compile_update,
)
from cypherbolt.core.relationships import RelationshipRepository

__all__ = [
    "CompileOptions",
    "OperationKind",
    "RelationshipRepository",
    "Statement",
    "compile_batch_create",
    "compile_batch_delete",
    "compile_batch_update",
    "compile_create",
    "compile_delete",
    "compile_statement",
    "compile_update",
]
