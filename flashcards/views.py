import logging
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from core.exceptions import NotFound
from home.models import Note
from user.authentication import FirebaseAuthentication
from .extraction import note_content
from .generator import answer_question, generate_flashcards
from .serializers import AskQuestionSerializer, FlashcardRequestSerializer, FlashcardSerializer

logger = logging.getLogger(__name__)


def _get_note(note_id):
    note = Note.objects.filter(pk=note_id).first()
    if note is None:
        raise NotFound("Note not found")
    return note


@method_decorator(never_cache, name="dispatch")
class GenerateFlashcardsView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = FlashcardRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        text = serializer.validated_data.get("noteContent")
        if not text:
            text = note_content(_get_note(serializer.validated_data["noteId"]))

        cards = generate_flashcards(text)
        return Response(FlashcardSerializer(cards, many=True).data, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class AskQuestionView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = AskQuestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        note = _get_note(serializer.validated_data["noteId"])
        answer = answer_question(note_content(note), serializer.validated_data["question"])
        return Response({"answer": answer}, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class NoteContentView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request, note_id):
        note = _get_note(note_id)
        return Response({"content": note_content(note)}, status=status.HTTP_200_OK)
