import json, math, re
from typing import Any, Dict

def strict_json_loads(text: str):
    starts = [m.start() for m in re.finditer(r'\{', text)]
    for s in starts:
        depth = 0
        for i, ch in enumerate(text[s:], start=s):
            if ch == '{': depth += 1
            elif ch == '}':
                depth -= 1
                if depth == 0:
                    cand = text[s:i+1]
                    try:
                        return json.loads(cand)
                    except json.JSONDecodeError:
                        break
    raise ValueError("No valid JSON found in output")

def extract_json(txt: str) -> Dict[str, Any]:
    """First balanced JSON object in *txt*, falling back to a greedy match."""
    try:
        return strict_json_loads(txt)
    except ValueError:
        m = re.search(r"\{[\s\S]*\}", txt or "")
        if not m:
            raise ValueError("model did not return JSON")
        return json.loads(m.group(0))

def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))
