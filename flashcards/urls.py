from django.urls import path
from .views import AskQuestionView, GenerateFlashcardsView, NoteContentView

urlpatterns = [
    path('generate/', GenerateFlashcardsView.as_view(), name='flashcards_generate'),
    path('ask/', AskQuestionView.as_view(), name='flashcards_ask'),
    path('note/<int:note_id>/content/', NoteContentView.as_view(), name='flashcards_note_content'),
]
