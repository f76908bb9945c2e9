"""
Pydantic models for the compact character save format
Short keys keep save files small; every field has the default a new
character would have, so older or hand-trimmed saves still load.
"""

from typing import Dict, Any, Optional, List, Tuple, Union, Literal
from pydantic import BaseModel, Field, ConfigDict

from character.models import MAX_RADIANT_IDEAL


class CompactSaveBase(BaseModel):
    """Fields shared by every compact save version"""
    model_config = ConfigDict(extra='ignore')

    p: str = Field(..., description="Player name")
    c: str = Field("", description="Character name")
    l: int = Field(1, ge=1, description="Level")
    a: Optional[str] = Field(None, description="Ancestry reference")
    h: List[str] = Field(default_factory=list, description="Path references (heroic and radiant)")
    ri: int = Field(0, ge=0, le=MAX_RADIANT_IDEAL, description="Radiant ideal")
    rp: str = Field("", description="Radiant path name")
    sn: str = Field("", description="Spren name")
    br: int = Field(30, description="Bond range in feet")
    at: Tuple[int, int, int, int, int, int] = Field(
        (2, 2, 2, 2, 2, 2), description="Attributes [str, spd, int, wil, awa, pre]"
    )
    m: int = Field(0, description="Marks")
    sk: List[Tuple[str, int]] = Field(default_factory=list, description="Ranked skills [reference, rank]")
    df: Tuple[int, int, int, int] = Field((10, 10, 10, 0), description="Defenses [phy, cog, spi, deflect]")
    hp: Tuple[int, int] = Field((10, 10), description="Health [current, max]")
    fo: Tuple[int, int] = Field((2, 2), description="Focus [current, max]")
    iv: Tuple[int, int] = Field((0, 0), description="Investiture [current, max]")
    mv: int = Field(20, description="Movement")
    rd: str = Field("1d4", description="Recovery die")
    lc: str = Field("", description="Lifting capacity")
    cc: str = Field("", description="Carrying capacity")
    ex: List[str] = Field(default_factory=list, description="Expertises")
    ta: List[Tuple[str, str, bool]] = Field(default_factory=list, description="Talents [reference, path, is key]")
    ot: List[str] = Field(default_factory=list, description="Other talents (free text)")
    pu: List[str] = Field(default_factory=list, description="Purpose")
    ob: List[str] = Field(default_factory=list, description="Obstacle")
    go: List[Tuple[str, int]] = Field(default_factory=list, description="Goals [text, level]")
    no: List[str] = Field(default_factory=list, description="Notes")
    cn: List[str] = Field(default_factory=list, description="Connections")
    co: List[str] = Field(default_factory=list, description="Conditions")
    ap: str = Field("", description="Appearance")


class CompactSaveV2(CompactSaveBase):
    """Current format: entities referenced by id, custom gear written inline"""
    v: Literal[2] = 2
    sr: str = Field("5 ft.", description="Senses range")
    wp: List[Union[str, Dict[str, Any]]] = Field(default_factory=list, description="Weapon ids or custom weapons")
    ar: List[Union[str, Dict[str, Any]]] = Field(default_factory=list, description="Armor ids or custom armor")
    eq: List[Union[str, Dict[str, Any]]] = Field(default_factory=list, description="Equipment ids or custom items")


class CompactSaveV1(CompactSaveBase):
    """Legacy format: entities referenced by display name, senses range as a number"""
    v: Literal[1] = 1
    sr: Union[int, float, str] = Field(5, description="Senses range in feet")
    wp: List[str] = Field(default_factory=list, description="Weapon names")
    ar: List[str] = Field(default_factory=list, description="Armor names")
    eq: List[str] = Field(default_factory=list, description="Equipment names")
