"""Application layer DI providers."""

from dishka import Scope, provide

from rolo.application.usecase.audit import ListAuditLogsUseCase, PruneAuditLogsUseCase
from rolo.application.usecase.collaborator import (
    AddCollaboratorUseCase,
    ChangeRoleUseCase,
    ListCollaboratorsUseCase,
    RemoveCollaboratorUseCase,
    ReviewCollaboratorUseCase,
    TransferOwnershipUseCase,
)
from rolo.application.usecase.community import (
    CheckHandleUseCase,
    CreateCommunityUseCase,
    DeleteCommunityUseCase,
    GetAccessStateUseCase,
    RequestJoinUseCase,
    UpdateCommunityUseCase,
)
from rolo.application.usecase.invite import (
    AcceptInviteUseCase,
    ExpireInvitesUseCase,
    ListInvitesUseCase,
    SendInviteUseCase,
    ValidateInviteUseCase,
)
from rolo.application.usecase.subscription import (
    CancelSubscriptionUseCase,
    ChangePlanUseCase,
    GetUsageUseCase,
    ListPlansUseCase,
    ReactivateSubscriptionUseCase,
    RecordStatusUseCase,
    UpdatePaymentMethodUseCase,
)
from rolo.config import Settings
from rolo.domain.service import (
    AccessControlService,
    AuditService,
    CommunityService,
    InviteService,
    NotificationService,
    SeatLimitService,
    SubscriptionService,
)
from rolo.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Community use cases
    @provide
    def get_create_community_use_case(
        self,
        access_control: AccessControlService,
        invite_service: InviteService,
        notification_service: NotificationService,
        settings: Settings,
    ) -> CreateCommunityUseCase:
        """Provide create community use case."""
        return CreateCommunityUseCase(
            access_control=access_control,
            invite_service=invite_service,
            notification_service=notification_service,
            settings=settings,
        )

    @provide
    def get_request_join_use_case(
        self, access_control: AccessControlService
    ) -> RequestJoinUseCase:
        return RequestJoinUseCase(access_control=access_control)

    @provide
    def get_update_community_use_case(
        self, access_control: AccessControlService
    ) -> UpdateCommunityUseCase:
        return UpdateCommunityUseCase(access_control=access_control)

    @provide
    def get_delete_community_use_case(
        self, access_control: AccessControlService
    ) -> DeleteCommunityUseCase:
        return DeleteCommunityUseCase(access_control=access_control)

    @provide
    def get_check_handle_use_case(
        self, access_control: AccessControlService
    ) -> CheckHandleUseCase:
        return CheckHandleUseCase(access_control=access_control)

    @provide
    def get_access_state_use_case(
        self, access_control: AccessControlService
    ) -> GetAccessStateUseCase:
        return GetAccessStateUseCase(access_control=access_control)

    # Collaborator use cases
    @provide
    def get_add_collaborator_use_case(
        self, access_control: AccessControlService
    ) -> AddCollaboratorUseCase:
        return AddCollaboratorUseCase(access_control=access_control)

    @provide
    def get_review_collaborator_use_case(
        self, access_control: AccessControlService
    ) -> ReviewCollaboratorUseCase:
        return ReviewCollaboratorUseCase(access_control=access_control)

    @provide
    def get_change_role_use_case(
        self, access_control: AccessControlService
    ) -> ChangeRoleUseCase:
        return ChangeRoleUseCase(access_control=access_control)

    @provide
    def get_remove_collaborator_use_case(
        self, access_control: AccessControlService
    ) -> RemoveCollaboratorUseCase:
        return RemoveCollaboratorUseCase(access_control=access_control)

    @provide
    def get_transfer_ownership_use_case(
        self, access_control: AccessControlService
    ) -> TransferOwnershipUseCase:
        return TransferOwnershipUseCase(access_control=access_control)

    @provide
    def get_list_collaborators_use_case(
        self, access_control: AccessControlService
    ) -> ListCollaboratorsUseCase:
        return ListCollaboratorsUseCase(access_control=access_control)

    # Invite use cases
    @provide
    def get_send_invite_use_case(
        self,
        access_control: AccessControlService,
        community_service: CommunityService,
        invite_service: InviteService,
        notification_service: NotificationService,
        settings: Settings,
    ) -> SendInviteUseCase:
        """Provide send invite use case."""
        return SendInviteUseCase(
            access_control=access_control,
            community_service=community_service,
            invite_service=invite_service,
            notification_service=notification_service,
            settings=settings,
        )

    @provide
    def get_accept_invite_use_case(
        self, invite_service: InviteService, community_service: CommunityService
    ) -> AcceptInviteUseCase:
        return AcceptInviteUseCase(
            invite_service=invite_service, community_service=community_service
        )

    @provide
    def get_validate_invite_use_case(
        self, invite_service: InviteService, community_service: CommunityService
    ) -> ValidateInviteUseCase:
        return ValidateInviteUseCase(
            invite_service=invite_service, community_service=community_service
        )

    @provide
    def get_list_invites_use_case(
        self,
        access_control: AccessControlService,
        invite_service: InviteService,
        settings: Settings,
    ) -> ListInvitesUseCase:
        return ListInvitesUseCase(
            access_control=access_control,
            invite_service=invite_service,
            settings=settings,
        )

    @provide
    def get_expire_invites_use_case(
        self, invite_service: InviteService
    ) -> ExpireInvitesUseCase:
        return ExpireInvitesUseCase(invite_service=invite_service)

    # Subscription use cases
    @provide
    def get_usage_use_case(
        self,
        access_control: AccessControlService,
        seat_limit_service: SeatLimitService,
        subscription_service: SubscriptionService,
    ) -> GetUsageUseCase:
        """Provide subscription usage use case."""
        return GetUsageUseCase(
            access_control=access_control,
            seat_limit_service=seat_limit_service,
            subscription_service=subscription_service,
        )

    @provide
    def get_list_plans_use_case(
        self, subscription_service: SubscriptionService
    ) -> ListPlansUseCase:
        return ListPlansUseCase(subscription_service=subscription_service)

    @provide
    def get_change_plan_use_case(
        self,
        access_control: AccessControlService,
        subscription_service: SubscriptionService,
        audit_service: AuditService,
    ) -> ChangePlanUseCase:
        return ChangePlanUseCase(access_control, subscription_service, audit_service)

    @provide
    def get_cancel_subscription_use_case(
        self,
        access_control: AccessControlService,
        subscription_service: SubscriptionService,
        audit_service: AuditService,
    ) -> CancelSubscriptionUseCase:
        return CancelSubscriptionUseCase(
            access_control, subscription_service, audit_service
        )

    @provide
    def get_reactivate_subscription_use_case(
        self,
        access_control: AccessControlService,
        subscription_service: SubscriptionService,
        audit_service: AuditService,
    ) -> ReactivateSubscriptionUseCase:
        return ReactivateSubscriptionUseCase(
            access_control, subscription_service, audit_service
        )

    @provide
    def get_update_payment_method_use_case(
        self,
        access_control: AccessControlService,
        subscription_service: SubscriptionService,
        audit_service: AuditService,
    ) -> UpdatePaymentMethodUseCase:
        return UpdatePaymentMethodUseCase(
            access_control, subscription_service, audit_service
        )

    @provide
    def get_record_status_use_case(
        self, subscription_service: SubscriptionService, audit_service: AuditService
    ) -> RecordStatusUseCase:
        return RecordStatusUseCase(
            subscription_service=subscription_service, audit_service=audit_service
        )

    # Audit use cases
    @provide
    def get_list_audit_logs_use_case(
        self, access_control: AccessControlService, audit_service: AuditService
    ) -> ListAuditLogsUseCase:
        return ListAuditLogsUseCase(
            access_control=access_control, audit_service=audit_service
        )

    @provide
    def get_prune_audit_logs_use_case(
        self, audit_service: AuditService, settings: Settings
    ) -> PruneAuditLogsUseCase:
        return PruneAuditLogsUseCase(audit_service=audit_service, settings=settings)
