from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class RawField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: StrictStr = Field(min_length=1)
    type_name: StrictStr = Field(alias="type")
    offset: StrictInt = Field(ge=0)
    size: StrictInt = Field(gt=0)


class RawClass(BaseModel):
    name: StrictStr = Field(min_length=1)
    parent: StrictStr | None = None
    size: StrictInt = Field(ge=0)
    scope: StrictStr | None = None
    fields: list[RawField] = Field(default_factory=list)


class RawSchema(BaseModel):
    classes: list[RawClass]
