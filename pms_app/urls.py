# pms_app/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # Projects
    path('projects', views.ProjectListView.as_view(), name='project-list'),
    path('projects/search', views.ProjectSearchView.as_view(), name='project-search'),
    path('projects/<uuid:pk>', views.ProjectDetailView.as_view(), name='project-detail'),
    path('projects/<uuid:pk>/progress', views.ProjectProgressView.as_view(), name='project-progress'),
    path('projects/<uuid:pk>/members', views.ProjectMemberListView.as_view(), name='project-members'),
    path('projects/<uuid:pk>/members/<int:user_id>', views.ProjectMemberDetailView.as_view(),
         name='project-member-detail'),

    # Tasks
    path('tasks/assigned-to-me', views.AssignedToMeView.as_view(), name='tasks-assigned-to-me'),
    path('tasks/overdue', views.OverdueTasksView.as_view(), name='tasks-overdue'),
    path('tasks/due-today', views.DueTodayTasksView.as_view(), name='tasks-due-today'),
    path('tasks/due-soon', views.DueSoonTasksView.as_view(), name='tasks-due-soon'),
    path('tasks/high-priority', views.HighPriorityTasksView.as_view(), name='tasks-high-priority'),
    path('tasks/project/<uuid:project_id>', views.ProjectTaskListView.as_view(), name='project-tasks'),
    path('tasks/project/<uuid:project_id>/status/<str:task_status>', views.ProjectTasksByStatusView.as_view(),
         name='project-tasks-by-status'),
    path('tasks/project/<uuid:project_id>/priority/<str:priority>', views.ProjectTasksByPriorityView.as_view(),
         name='project-tasks-by-priority'),
    path('tasks/<uuid:pk>', views.TaskDetailView.as_view(), name='task-detail'),
    path('tasks/<uuid:pk>/status', views.TaskStatusView.as_view(), name='task-status'),

    # Milestones
    path('projects/<uuid:project_id>/milestones', views.ProjectMilestoneListView.as_view(), name='project-milestones'),
    path('projects/<uuid:project_id>/milestones/overdue', views.OverdueMilestonesView.as_view(),
         name='project-milestones-overdue'),
    path('projects/<uuid:project_id>/milestones/upcoming', views.UpcomingMilestonesView.as_view(),
         name='project-milestones-upcoming'),
    path('projects/<uuid:project_id>/milestones/progress', views.MilestoneProgressView.as_view(),
         name='project-milestones-progress'),
    path('milestones/<uuid:pk>', views.MilestoneDetailView.as_view(), name='milestone-detail'),
    path('milestones/<uuid:pk>/toggle', views.MilestoneToggleView.as_view(), name='milestone-toggle'),

    # Time entries
    path('tasks/<uuid:task_id>/time-entries', views.TaskTimeEntryListView.as_view(), name='task-time-entries'),
    path('tasks/<uuid:task_id>/time-entries/me', views.MyTaskTimeEntryListView.as_view(),
         name='task-time-entries-me'),
    path('tasks/<uuid:task_id>/time-summary', views.TaskTimeSummaryView.as_view(), name='task-time-summary'),
    path('users/me/time-entries', views.MyTimeEntryListView.as_view(), name='my-time-entries'),
    path('users/me/total-hours', views.MyTotalHoursView.as_view(), name='my-total-hours'),

    # Comments
    path('tasks/<uuid:task_id>/comments', views.TaskCommentListView.as_view(), name='task-comments'),
    path('comments/<int:pk>', views.CommentDetailView.as_view(), name='comment-detail'),
    path('users/me/comments', views.MyCommentListView.as_view(), name='my-comments'),

    # Notifications
    path('notifications', views.NotificationListView.as_view(), name='notifications'),
    path('notifications/unread', views.UnreadNotificationListView.as_view(), name='notifications-unread'),
    path('notifications/unread-count', views.UnreadNotificationCountView.as_view(),
         name='notifications-unread-count'),
    path('notifications/read-all', views.MarkAllNotificationsReadView.as_view(), name='notifications-read-all'),
    path('notifications/<int:pk>/read', views.MarkNotificationReadView.as_view(), name='notification-read'),

    # WatermelonDB-style sync
    path('sync/', views.SyncView.as_view(), name='sync'),
]
