from typing import Any, Dict, Iterable, List, Mapping, Optional

CANONICAL_FIELDS: List[str] = [
    "HoleId",
    "HoleName",
    "RawStartPointX",
    "RawStartPointY",
    "RawStartPointZ",
    "RawEndPointX",
    "RawEndPointY",
    "RawEndPointZ",
]

REQUIRED_FIELDS: List[str] = ["HoleName", "RawStartPointX", "RawStartPointY"]


def match_headers(headers: Iterable[str]) -> Dict[str, str]:
    """Map canonical field names to the first header that contains them.

    Matching is case-insensitive and a canonical name may be a substring of
    a longer header, e.g. ``"rawstartpointx (m)"``.
    """
    mapping: Dict[str, str] = {}
    header_list = [h for h in headers if isinstance(h, str)]
    for canonical in CANONICAL_FIELDS:
        needle = canonical.lower()
        for header in header_list:
            if header.strip().lower() == needle:
                mapping[canonical] = header
                break
        else:
            for header in header_list:
                if needle in header.lower():
                    mapping[canonical] = header
                    break
    return mapping


def missing_required(mapping: Mapping[str, str]) -> List[str]:
    return [name for name in REQUIRED_FIELDS if name not in mapping]


def canonicalize_rows(rows: List[Mapping[str, Any]], mapping: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    if mapping is None:
        mapping = match_headers(dict.fromkeys(key for row in rows for key in row))
    return [{canonical: row.get(header) for canonical, header in mapping.items()} for row in rows]
