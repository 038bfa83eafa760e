from adminrbac.application.use_cases.bootstrap.seed_system_roles import SeedSystemRolesUseCase

__all__ = ["SeedSystemRolesUseCase"]
