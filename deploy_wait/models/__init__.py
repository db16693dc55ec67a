from deploy_wait.models.enums import READY_STATES, DeployState, Phase

__all__ = ["READY_STATES", "DeployState", "Phase"]
