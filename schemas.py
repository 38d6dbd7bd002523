from pydantic import BaseModel, Field
from typing import List, Literal, Optional

PhotoType = Literal["primary_headshot", "full_body", "hobby_activity", "pet", "group_social", "generic"]

class Features(BaseModel):
    quality: float
    aesthetics: float
    smileProb: float
    gazeDeg: float
    redFlag: bool
    petFlag: bool
    filterStrength: float
    numFaces: int = Field(ge=0)
    postureScore: float

class AnalyzedItem(BaseModel):
    index: int
    filename: str
    score: Optional[int] = Field(default=None, ge=0, le=100)
    role: PhotoType = "generic"
    features: Optional[Features] = None
    assessment: str = ""
    feedback: List[str] = []
    selected: bool = False
    error: Optional[str] = None
    feedback_error: Optional[str] = None

class Overall(BaseModel):
    profile_score: int = Field(ge=0, le=100)
    selected_profile_score: int = Field(ge=0, le=100)
    items_count: int
    scored_count: int
    failed_count: int
    provider: str
    scoring_version: str

class AnalyzeResponse(BaseModel):
    items: List[AnalyzedItem]
    scores: List[Optional[int]]
    feedback: List[List[str]]
    order: List[int]
    overall: Overall

class Base64AnalyzeRequest(BaseModel):
    images: List[str]
    filenames: Optional[List[str]] = None
