"""create_directory_tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


company_status = sa.Enum('active', 'suspended', name='companystatus')
company_sector = sa.Enum('Technologie', 'Santé', 'Éducation', 'Commerce', 'Services', 'Autre', name='companysector')
company_size = sa.Enum(
    '1-10 employés', '11-50 employés', '51-200 employés', '201-500 employés', '500+ employés',
    name='companysize'
)
company_type = sa.Enum('SAS', 'SARL', 'Auto-entrepreneur', 'Association', 'Autre', name='companytype')
user_role = sa.Enum('superadmin', 'company_admin', 'employee', name='userrole')


def upgrade() -> None:
    """Create company, user and employee tables."""
    op.create_table(
        'company',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('sector', company_sector, nullable=True),
        sa.Column('size', company_size, nullable=True),
        sa.Column('type', company_type, nullable=True),
        sa.Column('logo', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('qr_color', sa.String(), nullable=True),
        sa.Column('creation_year', sa.String(), nullable=True),
        sa.Column('status', company_status, nullable=False, server_default='active'),
        sa.Column('created_by', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_company_email', 'company', ['email'], unique=True)

    op.create_table(
        'user',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('role', user_role, nullable=False, server_default='employee'),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('company.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)
    op.create_index('ix_user_company_id', 'user', ['company_id'])

    op.create_table(
        'employee',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('company.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('surname', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        *[
            sa.Column(column, sa.String(), nullable=True)
            for column in (
                'patronymic', 'role', 'agency', 'phone', 'home_phone', 'work_phone',
                'insurance_agent', 'personal_site', 'birth_date', 'corporate_email',
                'home_address', 'facebook', 'x', 'linkedin', 'instagram', 'github',
                'icq', 'title', 'avatar', 'background',
            )
        ],
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_employee_company_id', 'employee', ['company_id'])
    op.create_index('ix_employee_user_id', 'employee', ['user_id'])


def downgrade() -> None:
    """Drop directory tables and their enum types."""
    op.drop_table('employee')
    op.drop_table('user')
    op.drop_table('company')
    for enum_type in (user_role, company_type, company_size, company_sector, company_status):
        enum_type.drop(op.get_bind(), checkfirst=True)
