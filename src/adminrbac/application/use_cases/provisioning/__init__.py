from adminrbac.application.use_cases.provisioning.provisioning_guard import ProvisioningGuard

__all__ = ["ProvisioningGuard"]
