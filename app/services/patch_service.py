"""
Two-phase partial updates.

A patch is never applied to the stored entity directly:
    1. materialize a projection of the entity into a plain dict
    2. apply the patch operations to that copy
    3. validate the copy against the projection schema
    4. merge back only the fields the patch named
"""
from typing import Any, Dict, List, Set, Tuple, Type

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from app.exceptions import ValidationFailedError
from app.schemas.patch import PatchOperation
from app.schemas.validation import validate_model


class PatchService:

    @staticmethod
    def materialize(entity: Any, schema: Type[BaseModel]) -> Dict[str, Any]:
        return {field: getattr(entity, field) for field in schema.model_fields}

    @staticmethod
    def _field_for(path: str, schema: Type[BaseModel]) -> str:
        parts = path.split("/")
        if len(parts) != 2 or parts[0] != "" or parts[1] not in schema.model_fields:
            raise ValidationFailedError(
                "Patch targets an unknown field",
                [{"field": path, "message": "Path is not patchable"}],
            )
        return parts[1]

    @staticmethod
    def apply_operations(
        snapshot: Dict[str, Any],
        operations: List[PatchOperation],
        schema: Type[BaseModel],
    ) -> Tuple[Dict[str, Any], Set[str]]:
        """Apply operations to a copy; returns the new document and touched fields"""
        document = dict(snapshot)
        touched: Set[str] = set()

        for operation in operations:
            field = PatchService._field_for(operation.path, schema)

            if operation.op in ("add", "replace"):
                document[field] = operation.value
                touched.add(field)
            elif operation.op == "remove":
                field_info = schema.model_fields[field]
                document[field] = None if field_info.is_required() else field_info.default
                touched.add(field)
            elif operation.op == "test":
                if jsonable_encoder(document[field]) != operation.value:
                    raise ValidationFailedError(
                        "Patch test operation failed",
                        [{"field": operation.path, "message": "Current value does not match"}],
                    )

        return document, touched

    @staticmethod
    def apply(entity: Any, operations: List[PatchOperation], schema: Type[BaseModel]) -> Set[str]:
        """
        Run the full patch cycle against an entity.

        The entity is only modified once the patched projection validates.
        """
        snapshot = PatchService.materialize(entity, schema)
        document, touched = PatchService.apply_operations(snapshot, operations, schema)
        validated = validate_model(schema, document)

        for field in touched:
            setattr(entity, field, getattr(validated, field))
        return touched
