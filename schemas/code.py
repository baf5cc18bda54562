from pydantic import BaseModel, Field


class CodeRequest(BaseModel):
    # code and language are checked by the route so that a missing field
    # answers 400 like every other execution error
    code: str | None = None
    language: str | None = None
    input: str | None = Field(default="", description="Data passed on stdin.")


class CodeOutput(BaseModel):
    output: str


class CodeError(BaseModel):
    message: str
    error: str | None = None
