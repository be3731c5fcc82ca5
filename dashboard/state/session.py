from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import streamlit as st

from alphadash.data.provider import Dataset, DatasetProvider
from alphadash.settings import Settings, StrategySettings

_STATE_KEY = "_alpha_dash_state"
_SETTINGS_KEY = "_alpha_dash_settings"
_PROVIDER_KEY = "_alpha_dash_provider"


@dataclass
class SessionState:
    buy_threshold: Optional[float] = None
    sell_threshold: Optional[float] = None
    transaction_cost_pct: Optional[float] = None
    selected_features: list = field(default_factory=list)

    def apply_defaults(self, defaults: StrategySettings) -> None:
        if self.buy_threshold is None:
            self.buy_threshold = defaults.buy_threshold
        if self.sell_threshold is None:
            self.sell_threshold = defaults.sell_threshold
        if self.transaction_cost_pct is None:
            self.transaction_cost_pct = defaults.transaction_cost * 100.0


def get_session_state() -> SessionState:
    if _STATE_KEY not in st.session_state:
        st.session_state[_STATE_KEY] = SessionState()
    return st.session_state[_STATE_KEY]


def set_settings(settings: Settings) -> None:
    st.session_state[_SETTINGS_KEY] = settings


def get_settings() -> Settings:
    return st.session_state[_SETTINGS_KEY]


def set_provider(provider: DatasetProvider) -> None:
    st.session_state[_PROVIDER_KEY] = provider


def has_provider() -> bool:
    return _PROVIDER_KEY in st.session_state


def get_provider() -> DatasetProvider:
    return st.session_state[_PROVIDER_KEY]


@st.cache_data(show_spinner="Loading dataset…", ttl=3600)
def _load_cached(cache_key: str, _provider: DatasetProvider) -> Dataset:
    return _provider.load()


def get_dataset() -> Dataset:
    """Load the dataset once per provider configuration; raises AlphaDashError."""
    provider = get_provider()
    cache_key = f"{provider.source!r}|{provider.csv_name}|{provider.json_name}|{provider.price_column}"
    return _load_cached(cache_key, provider)
