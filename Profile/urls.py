from django.urls import path
from .views import (
    FollowersView, FollowingView, FollowStatusView, FollowView, MyAvatarView, MyNotesView,
    MyProfileView, UserDetailView, UserNotesView, UserSearchView,
)

# Fixed paths first so "me" and "search" never match <uid>
urlpatterns = [
    path('me/', MyProfileView.as_view(), name='my_profile'),
    path('me/avatar/', MyAvatarView.as_view(), name='my_avatar'),
    path('me/notes/', MyNotesView.as_view(), name='my_notes'),
    path('search/', UserSearchView.as_view(), name='user_search'),
    path('<str:uid>/', UserDetailView.as_view(), name='user_detail'),
    path('<str:uid>/notes/', UserNotesView.as_view(), name='user_notes'),
    path('<str:uid>/follow/', FollowView.as_view(), name='follow_user'),
    path('<str:uid>/follow-status/', FollowStatusView.as_view(), name='follow_status'),
    path('<str:uid>/followers/', FollowersView.as_view(), name='followers'),
    path('<str:uid>/following/', FollowingView.as_view(), name='following'),
]
