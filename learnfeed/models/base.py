"""Shared pydantic base for artifact records."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ArtifactModel(BaseModel):
    """Base model serialized with camelCase keys in JSON artifacts.

    Fields are declared in snake_case; ``model_dump(by_alias=True)``
    produces the camelCase names used by the serving layer, and either
    spelling is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
