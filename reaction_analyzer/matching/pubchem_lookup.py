"""
PubChem lookup tier for compound resolution.

Queries PubChem's PUG REST API through an injected fetch callable:
1. Property row by name (or by CAS via the RN cross-reference namespace)
   -> canonical name, molecular weight, SMILES
2. In parallel, the registry-number cross-reference and the full compound
   record (density, boiling point, melting point, solubility)
3. Merge everything into a single ResolvedCompound

A failing property request raises; the engine turns that into a fall-through
to the local table. The two dependent lookups absorb their own failures.
"""

import logging
import math
import re
import urllib.parse
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from reaction_analyzer.matching.types import ResolutionOutcome, ResolvedCompound
from reaction_analyzer.normalization.cas_extractor import is_cas_number
from reaction_analyzer.remote.base_api import APIError
from reaction_analyzer.remote.pubchem import PUBCHEM_BASE

logger = logging.getLogger(__name__)

PROPERTY_LIST = 'MolecularWeight,IUPACName,IsomericSMILES'

# PC_Compounds value slots, in preference order
_VALUE_KEYS = ('fval', 'ival', 'sval', 'uintv')
_LEADING_NUMBER = re.compile(r'\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def build_pubchem_urls(identifier: str, base_url: str = PUBCHEM_BASE) -> Dict[str, str]:
    """
    Build the PUG REST URLs used for one identifier.

    CAS numbers are looked up through the ``xref/RN`` namespace, everything
    else by name.

    Returns:
        Dict with ``property_url``, ``xref_url`` and ``record_url``
    """
    key = (identifier or '').strip()
    if is_cas_number(key):
        namespace = f'{base_url}/compound/xref/RN/{key}'
    else:
        namespace = f"{base_url}/compound/name/{urllib.parse.quote(key, safe='')}"
    return {
        'property_url': f'{namespace}/property/{PROPERTY_LIST}/JSON',
        'xref_url': f'{namespace}/xrefs/RN/JSON',
        'record_url': f'{namespace}/JSON',
    }


def _to_number(value: Any) -> Optional[float]:
    """
    Parse a number from a PubChem value; None if not finite/parseable.

    Strings are read up to their leading number ("0.789 g/cm3" -> 0.789).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        value = match.group(0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _find_prop(props: List[Dict], label_fragment: str) -> Optional[Dict]:
    fragment = label_fragment.lower()
    for prop in props or []:
        label = ((prop or {}).get('urn') or {}).get('label') or ''
        if fragment in label.lower():
            return prop
    return None


def extract_prop_value(props: List[Dict], label_fragment: str) -> Any:
    """First raw value of the prop whose urn label contains ``label_fragment``."""
    prop = _find_prop(props, label_fragment)
    if prop is None:
        return None
    value = prop.get('value') or {}
    for key in _VALUE_KEYS:
        if value.get(key) is not None:
            return value[key]
    return None


def extract_solubility(props: List[Dict]) -> Optional[str]:
    """Solubility as display text (numbers get their unit appended)."""
    prop = _find_prop(props, 'solubility')
    if prop is None:
        return None
    value = prop.get('value') or {}
    raw = None
    for key in ('sval', 'fval', 'ival', 'uintv', 'urval'):
        if value.get(key) is not None:
            raw = value[key]
            break
    if raw is None:
        return value.get('unit') or None
    if isinstance(raw, (int, float)):
        return f"{raw} {value.get('unit') or ''}".strip()
    if isinstance(raw, str):
        return raw
    return None


class PubChemLookup:
    """
    Remote resolution tier backed by PubChem.

    The fetch callable receives a URL and returns a response object exposing
    ``ok``, ``status_code`` and ``json()`` (``requests.Response`` qualifies).
    """

    name = 'pubchem'

    def __init__(self, fetch: Callable[[str], Any], base_url: str = PUBCHEM_BASE):
        """
        Args:
            fetch: Remote lookup capability
            base_url: PUG REST base URL
        """
        self.fetch = fetch
        self.base_url = base_url

    def __call__(self, key: str, steps: Optional[list] = None) -> Optional[ResolutionOutcome]:
        compound = self.lookup(key)
        if steps is not None:
            steps.append(
                f"PubChem: property lookup for \"{key}\" via PUG REST /property and /JSON routes."
            )
        if compound is None:
            return None
        return ResolutionOutcome.resolved(compound)

    def lookup(self, identifier: str) -> Optional[ResolvedCompound]:
        """
        Fetch and merge the PubChem data for ``identifier``.

        Returns:
            ResolvedCompound, or None when PubChem has no usable property row

        Raises:
            APIError: If the property request is not successful
        """
        key = identifier.strip()
        urls = build_pubchem_urls(key, self.base_url)
        cas_key = is_cas_number(key)

        response = self.fetch(urls['property_url'])
        if not response.ok:
            raise APIError(f"PubChem response {response.status_code}")

        data = response.json() or {}
        try:
            prop = data['PropertyTable']['Properties'][0]
        except (KeyError, IndexError, TypeError):
            logger.debug(f"PubChem returned no property row for '{key}'")
            return None

        molar_mass = _to_number(prop.get('MolecularWeight'))
        if not molar_mass:
            logger.debug(f"PubChem property row for '{key}' has no molecular weight")
            return None

        with ThreadPoolExecutor(max_workers=2) as executor:
            record_future = executor.submit(self.fetch_physical_properties, urls['record_url'])
            cas_future = None if cas_key else executor.submit(self.fetch_cas_number, urls['xref_url'])
            physical = record_future.result()
            cas_number = key if cas_key else cas_future.result()

        boiling_point = _to_number(prop.get('BoilingPoint'))
        melting_point = _to_number(prop.get('MeltingPoint'))

        return ResolvedCompound(
            canonical_name=prop.get('IUPACName') or key,
            cas_number=cas_number,
            molar_mass=molar_mass,
            density=physical.get('density'),
            boiling_point=boiling_point if boiling_point is not None else physical.get('boiling_point'),
            melting_point=melting_point if melting_point is not None else physical.get('melting_point'),
            solubility=physical.get('solubility'),
            smiles=prop.get('IsomericSMILES') or prop.get('SMILES'),
            source='pubchem',
        )

    def fetch_cas_number(self, url: str) -> Optional[str]:
        """First registry number from the RN cross-reference, or None."""
        try:
            response = self.fetch(url)
            if not response.ok:
                return None
            data = response.json() or {}
            rns = data['InformationList']['Information'][0]['RN']
        except Exception as e:
            logger.debug(f"PubChem RN cross-reference failed: {e}")
            return None
        if isinstance(rns, list) and rns:
            return rns[0]
        return None

    def fetch_physical_properties(self, url: str) -> Dict[str, Any]:
        """Density, boiling/melting point and solubility from the full record."""
        try:
            response = self.fetch(url)
            if not response.ok:
                return {}
            data = response.json() or {}
            props = data['PC_Compounds'][0]['props']
        except Exception as e:
            logger.debug(f"PubChem record lookup failed: {e}")
            return {}
        if not props:
            return {}
        return {
            'density': _to_number(extract_prop_value(props, 'density')),
            'boiling_point': _to_number(extract_prop_value(props, 'boiling point')),
            'melting_point': _to_number(extract_prop_value(props, 'melting point')),
            'solubility': extract_solubility(props),
        }
