from pydantic import BaseModel, Field
from typing import List, Optional


# --- Saints ---

class SaintValidation(BaseModel):
    is_saint: bool = Field(..., description='True if the person is a recognized (canonized or beatified) Catholic Saint, false otherwise.')
    reasoning: str = Field(..., description='A brief, one-sentence explanation for the decision, especially if false.')


class SaintInfo(BaseModel):
    name: str = Field(..., description='The full name of the saint, including titles like "St.".')
    feast_day: str = Field(..., description='The feast day of the saint (e.g., "October 4").')
    patronage: List[str] = Field(..., description='A list of things the saint is a patron of.')
    summary: str = Field(..., description="A one-paragraph summary of the saint's life and significance.")
    biography: str = Field(..., description='A detailed biography covering life, major events and legacy, at least 3-4 paragraphs long.')
    quotes: List[str] = Field(..., description='A list of 2-3 notable quotes attributed to the saint.')
    image_url: Optional[str] = None


class SaintOfTheDay(BaseModel):
    name: str = Field(..., description='The name of the saint or blessed.')
    summary: str = Field(..., description='One or two sentences on who they were.')


class SaintSuggestions(BaseModel):
    suggestions: List[str] = Field(..., description='Names of Catholic saints matching the partial query, best match first.')


# --- Scripture ---

class BibleVerse(BaseModel):
    reference: str = Field(..., description='The Bible reference for the verse (e.g., "John 3:16").')
    text: str = Field(..., description='The full text of the verse.')


class ChapterVerse(BaseModel):
    verse: int = Field(..., ge=1, description='The verse number.')
    text: str = Field(..., description='The text of the verse without its number.')


class GospelReading(BaseModel):
    reference: str = Field(..., description='The Gospel reference (e.g., "Luke 10:1-9").')
    text: str = Field(..., description='The full Gospel passage, paragraphs separated by newlines.')


# --- Miracles ---

class MiracleSource(BaseModel):
    uri: str
    title: str


class EucharisticMiracle(BaseModel):
    summary: str
    sources: List[MiracleSource] = []


# --- Chants ---

class Chant(BaseModel):
    title: str = Field(..., description='The title of the chant as printed in the chant book.')


class ChantDetails(BaseModel):
    title: str
    lyrics: str
