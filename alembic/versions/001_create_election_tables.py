"""Create the election aggregate tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

elections is the aggregate root; election_questions, question_answers,
election_lotteries and election_images cascade from it.
"""

from alembic import op


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the five tables with their constraints and indexes."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS elections (
            id SERIAL PRIMARY KEY,
            title VARCHAR(500) NOT NULL,
            description TEXT NOT NULL,
            topic_video_url VARCHAR(500),
            custom_voting_url VARCHAR(255) UNIQUE,
            topic_image_url VARCHAR(500),
            logo_branding_url VARCHAR(500),
            start_date DATE NOT NULL,
            end_date DATE NOT NULL,
            start_time VARCHAR(5) NOT NULL DEFAULT '09:00',
            end_time VARCHAR(5) NOT NULL DEFAULT '18:00',
            timezone VARCHAR(64) NOT NULL DEFAULT 'UTC',
            voting_type VARCHAR(32) NOT NULL,
            permission_to_vote VARCHAR(32) NOT NULL,
            auth_method VARCHAR(32) NOT NULL,
            biometric_required BOOLEAN DEFAULT FALSE,
            allow_oauth BOOLEAN DEFAULT TRUE,
            allow_magic_link BOOLEAN DEFAULT TRUE,
            allow_email_password BOOLEAN DEFAULT TRUE,
            is_country_specific BOOLEAN DEFAULT FALSE,
            countries TEXT,
            pricing_type VARCHAR(32) NOT NULL,
            is_paid BOOLEAN DEFAULT FALSE,
            participation_fee NUMERIC(12, 2) DEFAULT 0,
            regional_fees TEXT,
            processing_fee_percentage NUMERIC(5, 2) DEFAULT 0,
            projected_revenue NUMERIC(14, 2) DEFAULT 0,
            revenue_share_percentage NUMERIC(5, 2) DEFAULT 0,
            show_live_results BOOLEAN DEFAULT TRUE,
            allow_vote_editing BOOLEAN DEFAULT TRUE,
            custom_css TEXT,
            brand_colors TEXT,
            primary_language VARCHAR(10) DEFAULT 'en',
            supports_multilang BOOLEAN DEFAULT FALSE,
            is_draft BOOLEAN DEFAULT TRUE,
            is_published BOOLEAN DEFAULT FALSE,
            creator_id INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_saved TIMESTAMP,
            CONSTRAINT ck_elections_voting_type
                CHECK (voting_type IN ('plurality', 'ranked_choice', 'approval')),
            CONSTRAINT ck_elections_pricing_type
                CHECK (pricing_type IN ('free', 'general', 'regional'))
        );

        CREATE INDEX IF NOT EXISTS ix_elections_creator_id
            ON elections (creator_id);

        CREATE TABLE IF NOT EXISTS election_questions (
            id SERIAL PRIMARY KEY,
            election_id INTEGER NOT NULL
                REFERENCES elections(id) ON DELETE CASCADE,
            question_text TEXT NOT NULL,
            question_type VARCHAR(32) NOT NULL,
            is_required BOOLEAN DEFAULT TRUE,
            allow_other_option BOOLEAN DEFAULT FALSE,
            character_limit INTEGER DEFAULT 5000,
            question_order INTEGER NOT NULL,
            question_external_id VARCHAR(255),
            question_image_url VARCHAR(500),
            CONSTRAINT uq_election_questions_order
                UNIQUE (election_id, question_order),
            CONSTRAINT uq_election_questions_external_id
                UNIQUE (election_id, question_external_id),
            CONSTRAINT ck_election_questions_type
                CHECK (question_type IN
                    ('multiple_choice', 'open_text', 'image_based', 'comparison'))
        );

        CREATE INDEX IF NOT EXISTS ix_election_questions_election_id
            ON election_questions (election_id);

        CREATE TABLE IF NOT EXISTS question_answers (
            id SERIAL PRIMARY KEY,
            question_id INTEGER NOT NULL
                REFERENCES election_questions(id) ON DELETE CASCADE,
            answer_text TEXT NOT NULL,
            answer_order INTEGER NOT NULL,
            answer_external_id VARCHAR(255),
            answer_image_url VARCHAR(500),
            CONSTRAINT uq_question_answers_order
                UNIQUE (question_id, answer_order),
            CONSTRAINT uq_question_answers_external_id
                UNIQUE (question_id, answer_external_id)
        );

        CREATE INDEX IF NOT EXISTS ix_question_answers_question_id
            ON question_answers (question_id);

        CREATE TABLE IF NOT EXISTS election_lotteries (
            id SERIAL PRIMARY KEY,
            election_id INTEGER NOT NULL UNIQUE
                REFERENCES elections(id) ON DELETE CASCADE,
            is_lotterized BOOLEAN DEFAULT TRUE,
            reward_type VARCHAR(32) NOT NULL,
            reward_amount NUMERIC(12, 2) DEFAULT 0,
            non_monetary_reward TEXT,
            winner_count INTEGER DEFAULT 1,
            lottery_active BOOLEAN DEFAULT TRUE,
            CONSTRAINT ck_election_lotteries_reward_type
                CHECK (reward_type IN ('monetary', 'non_monetary')),
            CONSTRAINT ck_election_lotteries_winner_count
                CHECK (winner_count >= 1)
        );

        CREATE TABLE IF NOT EXISTS election_images (
            id SERIAL PRIMARY KEY,
            election_id INTEGER NOT NULL
                REFERENCES elections(id) ON DELETE CASCADE,
            image_type VARCHAR(16) NOT NULL,
            storage_id VARCHAR(255) NOT NULL,
            url VARCHAR(500) NOT NULL,
            original_filename VARCHAR(255),
            reference_id INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT ck_election_images_image_type
                CHECK (image_type IN ('topic', 'logo', 'question', 'answer'))
        );

        CREATE INDEX IF NOT EXISTS ix_election_images_election_id
            ON election_images (election_id);
    """)


def downgrade() -> None:
    """Drop the tables, children first."""
    op.execute("""
        DROP TABLE IF EXISTS election_images;
        DROP TABLE IF EXISTS election_lotteries;
        DROP TABLE IF EXISTS question_answers;
        DROP TABLE IF EXISTS election_questions;
        DROP TABLE IF EXISTS elections;
    """)
