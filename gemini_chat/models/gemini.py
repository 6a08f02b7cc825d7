"""
Gemini generateContent models

Request payload parts are serialized with the camelCase field names the
REST endpoint expects; response models ignore anything they do not name.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union


class InlineData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(alias="mimeType")
    data: str


class TextPart(BaseModel):
    text: str


class InlineDataPart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inline_data: InlineData = Field(alias="inlineData")


class Content(BaseModel):
    parts: List[Union[TextPart, InlineDataPart]] = Field(default_factory=list)


class GenerateContentRequest(BaseModel):
    """Provider payload: a single user turn made of ordered parts"""
    contents: List[Content]

    @classmethod
    def from_text(cls, text: str) -> "GenerateContentRequest":
        return cls(contents=[Content(parts=[TextPart(text=text)])])

    @property
    def parts(self) -> List[Union[TextPart, InlineDataPart]]:
        return self.contents[0].parts

    def add_inline_image(self, data: str, mime_type: str) -> None:
        self.contents[0].parts.append(
            InlineDataPart(inline_data=InlineData(mime_type=mime_type, data=data))
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class ResponsePart(BaseModel):
    text: Optional[str] = None


class ResponseContent(BaseModel):
    parts: Optional[List[ResponsePart]] = None


class Candidate(BaseModel):
    content: Optional[ResponseContent] = None


class GenerateContentResponse(BaseModel):
    candidates: Optional[List[Candidate]] = None

    def reply_text(self) -> str:
        """
        Join the text of the first candidate's parts with single spaces

        Returns an empty string when there is no candidate or it has no parts.
        """
        if not self.candidates:
            return ""
        content = self.candidates[0].content
        if not content or not content.parts:
            return ""
        return " ".join(part.text or "" for part in content.parts)
