from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8b42e6c1d5a3'
down_revision = '3f1c2b7d9e10'
branch_labels = None
depends_on = None


def upgrade():
    op.add_column('hackathon_teams', sa.Column('theme', sa.String(length=255), nullable=True))

    op.create_table(
        'mentor_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mentor_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, unique=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('mentor_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'task_steps',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id'), nullable=False),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('submission_type', sa.String(length=20), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('task_id', 'step_number', name='unique_task_step_number')
    )

    op.create_table(
        'task_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('assigned_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('task_id', 'student_id', name='unique_task_student')
    )

    op.create_table(
        'task_step_completions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('assignment_id', sa.Integer(), sa.ForeignKey('task_assignments.id'), nullable=False),
        sa.Column('step_id', sa.Integer(), sa.ForeignKey('task_steps.id'), nullable=False),
        sa.Column('text_content', sa.Text(), nullable=True),
        sa.Column('link_url', sa.String(length=500), nullable=True),
        sa.Column('file_url', sa.String(length=500), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('assignment_id', 'step_id', name='unique_assignment_step')
    )

    op.create_table(
        'points_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('action_type', sa.String(length=50), nullable=False, unique=True),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False)
    )

    op.create_table(
        'points_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('action_type', sa.String(length=50), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('reference_id', sa.String(length=64), nullable=True),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False)
    )
    op.create_index('ix_points_history_user_id', 'points_history', ['user_id'])


def downgrade():
    op.drop_index('ix_points_history_user_id', table_name='points_history')
    op.drop_table('points_history')
    op.drop_table('points_config')
    op.drop_table('task_step_completions')
    op.drop_table('task_assignments')
    op.drop_table('task_steps')
    op.drop_table('tasks')
    op.drop_table('mentor_assignments')
    op.drop_column('hackathon_teams', 'theme')
