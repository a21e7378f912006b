import logging
from django.db.models import Q
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from core.exceptions import Forbidden, InvalidRequest, NotFound
from Profile.models import UserProfile
from user.authentication import FirebaseAuthentication
from .models import Note
from .reactions import dislike, like
from .serializers import NoteBrowseSerializer, NoteSerializer, NoteUpdateSerializer, NoteUploadSerializer
from .storage import delete_stored, store_upload

logger = logging.getLogger(__name__)


def _get_note(note_id):
    note = Note.objects.filter(pk=note_id).first()
    if note is None:
        raise NotFound("Note not found")
    return note


def _get_owned_note(note_id, user):
    note = _get_note(note_id)
    if note.uploader_uid != user.uid:
        logger.warning(f"User {user.uid} tried to modify note {note_id} owned by {note.uploader_uid}")
        raise Forbidden("Forbidden")
    return note


@method_decorator(never_cache, name="dispatch")
class NoteUploadView(APIView):
    parser_classes = (MultiPartParser, FormParser)
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request):
        if not request.FILES.get("file"):
            raise InvalidRequest("No file uploaded")

        serializer = NoteUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = request.user

        # Prefer the stored username; fall back to what the token carries
        profile = UserProfile.objects.only('username').filter(firebase_uid=user.uid).first()
        uploader = profile.username if profile else (user.display_name or user.email or user.uid)

        stored = store_upload(data["file"], folder="uploads")

        note = Note.objects.create(
            title=data["title"],
            filename=stored.filename,
            uploader=uploader,
            uploader_uid=user.uid,
            file_url=stored.url,
            year=data["year"],
            semester=data["semester"],
            subject=data["subject"],
            description=data.get("description", ""),
        )
        logger.info(f"Note {note.pk} uploaded by {user.uid}: {note.title}")
        return Response(NoteSerializer(note).data, status=status.HTTP_201_CREATED)


class PublicNotesView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        params = NoteBrowseSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        filters = params.validated_data

        queryset = Note.objects.all()
        search = (filters.get("q") or "").strip()
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search)
                | Q(subject__icontains=search)
                | Q(description__icontains=search)
                | Q(uploader__icontains=search)
            )
        for field in ("year", "semester", "subject"):
            if filters.get(field):
                queryset = queryset.filter(**{f"{field}__iexact": filters[field]})
        if filters.get("uploader"):
            queryset = queryset.filter(uploader_uid=filters["uploader"])

        queryset = queryset.order_by('-year', '-semester', '-created_at', '-id')
        if filters.get("limit"):
            queryset = queryset[:filters["limit"]]

        serializer = NoteSerializer(queryset.prefetch_related('reactions'), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class NoteDetailView(APIView):
    authentication_classes = [FirebaseAuthentication]

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request, note_id):
        note = _get_note(note_id)
        return Response(NoteSerializer(note).data, status=status.HTTP_200_OK)

    def patch(self, request, note_id):
        note = _get_owned_note(note_id, request.user)

        serializer = NoteUpdateSerializer(note, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(f"Note {note.pk} updated by {request.user.uid}")
        return Response(NoteSerializer(note).data, status=status.HTTP_200_OK)

    def delete(self, request, note_id):
        note = _get_owned_note(note_id, request.user)

        file_url = note.file_url
        note.delete()
        delete_stored(file_url)

        logger.info(f"Note {note_id} deleted by {request.user.uid}")
        return Response({"ok": True}, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class NoteLikeView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request, note_id):
        counts = like(note_id, request.user.uid)
        return Response(counts, status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class NoteDislikeView(APIView):
    authentication_classes = [FirebaseAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request, note_id):
        counts = dislike(note_id, request.user.uid)
        return Response(counts, status=status.HTTP_200_OK)
