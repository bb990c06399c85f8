from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal, Optional


ProbeKind = Literal["text", "exists"]


# Runs in the page. Takes the serialized DomProbe as its argument so the script itself never changes.
PROBE_SCRIPT = """
(probe) => {
  const e = document.querySelector(probe.selector);
  if (probe.kind === "exists") {
    return e !== null;
  }
  if (e === null) {
    return null;
  }
  return (e.textContent || "").trim();
}
"""


@dataclass(frozen=True)
class DomProbe:
    """
    A serializable description of something to read from the live DOM.

    kind="text":   None if the element is absent, otherwise its trimmed textContent ("" if empty).
    kind="exists": True/False.
    """

    selector: str
    kind: ProbeKind = "text"

    def as_arg(self) -> dict[str, str]:
        return asdict(self)


async def evaluate_probe(page: Any, probe: DomProbe) -> Any:
    return await page.evaluate(PROBE_SCRIPT, probe.as_arg())


async def probe_text(page: Any, probe: DomProbe) -> Optional[str]:
    """
    Read the trimmed text of `probe.selector`.

    Keeps the three cases apart: absent (None), present but empty (""), present with text.
    """
    value = await evaluate_probe(page, DomProbe(probe.selector, "text"))
    if value is None:
        return None
    return str(value)
