"""Shared dependencies for the FastAPI web layer."""

from dataclasses import dataclass

from fastapi import Request

from roadmap.derived_state import is_roadmap_complete, snapshot
from roadmap.id_translator import verify_catalog_mapping
from roadmap.local_cache import LocalCache
from roadmap.progress_machine import roadmap
from roadmap.remote_client import RemoteStore
from roadmap.session_reconciler import SessionReconciler
from roadmap.session_state import SessionState
from roadmap.sync_gateway import SyncGateway


@dataclass
class ProgressSync:
    """Everything one local user session needs, wired together."""

    state: SessionState
    cache: LocalCache
    remote: RemoteStore
    gateway: SyncGateway
    reconciler: SessionReconciler


def build_sync(cache_path=None, base_url=None, transport=None) -> ProgressSync:
    """Wire state, cache, remote client, gateway and reconciler, then restore from cache."""
    state = SessionState()
    cache = LocalCache(cache_path)
    remote = RemoteStore(token_provider=lambda: state.token, base_url=base_url, transport=transport)
    gateway = SyncGateway(state, cache, remote)
    reconciler = SessionReconciler(gateway, remote)
    verify_catalog_mapping(state.steps)
    gateway.restore_from_cache()
    return ProgressSync(state=state, cache=cache, remote=remote, gateway=gateway, reconciler=reconciler)


def get_sync(request: Request) -> ProgressSync:
    """Return the process-wide ProgressSync, building it on first use."""
    sync = getattr(request.app.state, "sync", None)
    if sync is None:
        sync = build_sync()
        request.app.state.sync = sync
    return sync


def progress_view(sync: ProgressSync) -> dict:
    """Return the snapshot, roadmap and state projection for the UI."""
    state = sync.state
    return {
        "snapshot": snapshot(state).to_dict(),
        "roadmap": roadmap(state.steps),
        "roadmap_complete": is_roadmap_complete(state.steps),
        "state": state.projection(),
        "sync_status": {op: status.value for op, status in sync.gateway.status.items()},
    }
