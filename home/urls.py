from django.urls import path
from .views import NoteDetailView, NoteDislikeView, NoteLikeView, NoteUploadView, PublicNotesView

urlpatterns = [
    path('upload/', NoteUploadView.as_view(), name='note_upload'),
    path('public/notes/', PublicNotesView.as_view(), name='public_notes'),
    path('notes/<int:note_id>/', NoteDetailView.as_view(), name='note_detail'),
    path('notes/<int:note_id>/like/', NoteLikeView.as_view(), name='note_like'),
    path('notes/<int:note_id>/dislike/', NoteDislikeView.as_view(), name='note_dislike'),
]
