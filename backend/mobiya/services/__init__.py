"""Services package"""
from mobiya.services.provider_registry import provider_registry, ProviderUnavailable, ProviderTimeout
from mobiya.services.provider_chain import ProviderChain
from mobiya.services.admission_gate import AdmissionGate, is_gibberish
from mobiya.services.query_expander import query_expander, expand_query
from mobiya.services.overlap_scorer import overlap_scorer, has_strong_lexical_overlap, score_overlap
from mobiya.services.orchestrator import orchestrator, classify_and_prepare
from mobiya.services.transcript_store import transcript_store
