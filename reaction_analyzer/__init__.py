"""
Reaction Analyzer - Source Package

Main modules:
- extraction: Candidate chemical entries from free reaction text
- normalization: CAS handling and quantity-to-moles conversion
- matching: Compound resolution (PubChem tier + local fallback table)
- stoichiometry: Limiting reagent, equivalents and theoretical yield
- remote: Rate-limited HTTP fetchers for the PubChem PUG REST API
- utils: YAML configuration management
- pipeline: End-to-end analyze_reaction entry point
- batch: Analysis of tabular reaction lists (pandas)
"""

__version__ = "1.0.0"
