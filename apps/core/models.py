"""
Core Models for E-Life Admin Backend

These are UNMANAGED models that map to existing Supabase PostgreSQL tables.
They do NOT create migrations - Django reads from existing tables.
"""
import uuid

from django.db import models
from django.utils import timezone

from .constants import AGENT_ROLE_CHOICES, MODULE_TYPE_CHOICES


class Division(models.Model):
    """
    Top-level organizational unit scoping programs and admins.
    Maps to: public.divisions
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    color = models.CharField(max_length=50, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False  # Don't create migrations
        db_table = 'divisions'

    def __str__(self):
        return self.name


class Panchayath(models.Model):
    """
    Local-government area; primary geographic grouping key.
    Maps to: public.panchayaths
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'panchayaths'

    def __str__(self):
        return self.name


class Cluster(models.Model):
    """
    Sub-grouping of members within a panchayath.
    Maps to: public.clusters
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    panchayath = models.ForeignKey(
        Panchayath,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='clusters'
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'clusters'

    def __str__(self):
        return self.name


class Profile(models.Model):
    """
    Public profile of a Supabase auth user.
    Maps to: public.profiles (id = auth.users.id)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    full_name = models.CharField(max_length=255, null=True, blank=True)
    email = models.CharField(max_length=255)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'profiles'

    def __str__(self):
        return self.full_name or self.email


class UserRole(models.Model):
    """
    Application role granted to an auth user.
    Maps to: public.user_roles
    """
    ROLE_CHOICES = [
        ('super_admin', 'Super Admin'),
        ('admin', 'Admin'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = models.UUIDField()
    role = models.CharField(max_length=50, choices=ROLE_CHOICES)

    class Meta:
        managed = False
        db_table = 'user_roles'

    def __str__(self):
        return f"{self.user_id}: {self.role}"


class Admin(models.Model):
    """
    Division administrator account.
    Maps to: public.admins
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    user_id = models.UUIDField()
    division = models.ForeignKey(
        Division,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='admins'
    )
    additional_division_ids = models.JSONField(default=list, blank=True)
    access_all_divisions = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    phone = models.CharField(max_length=50, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'admins'

    def __str__(self):
        return f"Admin {self.user_id}"


class Member(models.Model):
    """
    Registered member of a cluster.
    Maps to: public.members
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255, null=True, blank=True)
    division = models.ForeignKey(
        Division,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members'
    )
    cluster = models.ForeignKey(
        Cluster,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members'
    )
    panchayath = models.ForeignKey(
        Panchayath,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members'
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'members'

    def __str__(self):
        return self.name or str(self.id)


class Program(models.Model):
    """
    A division program, optionally tied to one panchayath or to all of them.
    Maps to: public.programs
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    division = models.ForeignKey(
        Division,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='programs'
    )
    panchayath = models.ForeignKey(
        Panchayath,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='programs'
    )
    all_panchayaths = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'programs'

    def __str__(self):
        return self.name


class ProgramModule(models.Model):
    """
    Independently publishable feature attached to a program.
    Maps to: public.program_modules
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name='modules'
    )
    module_type = models.CharField(max_length=50, choices=MODULE_TYPE_CHOICES)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'program_modules'
        constraints = [
            models.UniqueConstraint(
                fields=['program', 'module_type'],
                name='program_modules_program_type_key',
            ),
        ]

    def __str__(self):
        return f"{self.program_id}: {self.module_type}"


class ProgramFormQuestion(models.Model):
    """
    Custom question on a program's registration form.
    Maps to: public.program_form_questions
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name='questions'
    )
    question_text = models.TextField()
    question_type = models.CharField(max_length=50, default='text')
    options = models.JSONField(default=list, blank=True)
    is_required = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=0)

    class Meta:
        managed = False
        db_table = 'program_form_questions'

    def __str__(self):
        return self.question_text


class ProgramRegistration(models.Model):
    """
    Public submission against a program's form.
    Maps to: public.program_registrations

    answers holds custom answers keyed by question id plus the reserved
    `_fixed` block (name, mobile, panchayath_id, panchayath_name, ward).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name='registrations'
    )
    answers = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'program_registrations'

    def __str__(self):
        return f"Registration {self.id}"


class ProgramAnnouncement(models.Model):
    """
    Announcement module content.
    Maps to: public.program_announcements
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name='announcements'
    )
    title = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    poster_url = models.TextField(null=True, blank=True)
    video_url = models.TextField(null=True, blank=True)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'program_announcements'

    def __str__(self):
        return self.title


class ProgramAdvertisement(models.Model):
    """
    Advertisement module content.
    Maps to: public.program_advertisements
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    program = models.ForeignKey(
        Program,
        on_delete=models.CASCADE,
        related_name='advertisements'
    )
    title = models.CharField(max_length=255, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    poster_url = models.TextField(null=True, blank=True)
    video_url = models.TextField(null=True, blank=True)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'program_advertisements'

    def __str__(self):
        return self.title or 'Untitled Advertisement'


class PennyekartAgent(models.Model):
    """
    Field agent in the Pennyekart reporting chain.
    Maps to: public.pennyekart_agents

    parent_agent is self-referential and is NOT guaranteed to be acyclic.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    name = models.CharField(max_length=255)
    mobile = models.CharField(max_length=20)
    role = models.CharField(max_length=50, choices=AGENT_ROLE_CHOICES)
    parent_agent = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='children'
    )
    panchayath = models.ForeignKey(
        Panchayath,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='agents'
    )
    ward = models.CharField(max_length=20, default='N/A')
    customer_count = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'pennyekart_agents'

    def __str__(self):
        return f"{self.name} ({self.role})"
