# hiring_api/utils/normalize.py
import re
from typing import List, Optional, Union

EMPLOYMENT_TYPES_EN = ("Full-Time", "Part-Time", "Contract")
EMPLOYMENT_TYPES_AR = ("دوام كامل", "دوام جزئي", "عقد")

_EMPLOYMENT_EN = {
    "full-time": "Full-Time", "full_time": "Full-Time", "full time": "Full-Time",
    "part-time": "Part-Time", "part_time": "Part-Time", "part time": "Part-Time",
    "contract": "Contract", "freelance": "Contract",
}


def norm_employment_type_en(v: Optional[str]) -> Optional[str]:
    """
    Normalize an English employment type to one of:
      - Full-Time, Part-Time, Contract
    Unknown values are returned stripped so validation can reject them.
    """
    if v is None:
        return None
    s = str(v).strip()
    return _EMPLOYMENT_EN.get(s.lower(), s)


def split_lines(value: Union[str, List[str], None]) -> Optional[List[str]]:
    """
    Free text from a textarea → list of non-blank lines.
    Lists pass through untouched.
    """
    if isinstance(value, str):
        return [line for line in re.split(r"\r?\n", value) if line.strip() != ""]
    return value
