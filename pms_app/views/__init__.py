from .projects import (
    ProjectListView, ProjectDetailView, ProjectProgressView, ProjectSearchView,
    ProjectMemberListView, ProjectMemberDetailView,
)
from .tasks import (
    ProjectTaskListView, TaskDetailView, TaskStatusView, ProjectTasksByStatusView, ProjectTasksByPriorityView,
    AssignedToMeView, OverdueTasksView, DueTodayTasksView, DueSoonTasksView, HighPriorityTasksView,
)
from .milestones import (
    ProjectMilestoneListView, MilestoneDetailView, MilestoneToggleView,
    OverdueMilestonesView, UpcomingMilestonesView, MilestoneProgressView,
)
from .activity import (
    TaskTimeEntryListView, MyTaskTimeEntryListView, TaskTimeSummaryView, MyTimeEntryListView, MyTotalHoursView,
    TaskCommentListView, CommentDetailView, MyCommentListView,
)
from .notifications import (
    NotificationListView, UnreadNotificationListView, UnreadNotificationCountView,
    MarkNotificationReadView, MarkAllNotificationsReadView,
)
from .sync import SyncView
