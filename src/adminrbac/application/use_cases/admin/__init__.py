from adminrbac.application.use_cases.admin.list_admins import GetAdminUseCase, ListAdminsUseCase

__all__ = ["GetAdminUseCase", "ListAdminsUseCase"]
