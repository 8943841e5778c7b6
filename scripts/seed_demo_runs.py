#!/usr/bin/env python3
"""Script to add the DEMO01 and DEMO02 sample runs to the store."""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from hoops_draft.services.demo_runs import seed_demo_runs
from hoops_draft.services.draft_store import DraftStore
from hoops_draft.services.game_config import GameConfig
from hoops_draft.services.reference_data import ReferenceData


def main():
    """Seed the demo runs."""
    config = GameConfig.from_env()
    reference = ReferenceData.from_directory(config.resolved_data_dir())
    store = DraftStore(config.resolved_store_dir())

    print(f"Store directory: {store.store_dir}")
    runs = seed_demo_runs(reference, store, config)
    for run in runs:
        print(f"✓ {run.share_code}: {run.team_score:.1f}")

    print(f"\n✓ Seed complete. Added demo runs {' and '.join(run.share_code for run in runs)}.")


if __name__ == "__main__":
    main()
