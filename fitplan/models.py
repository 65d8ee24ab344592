"""
Supabase tables used by the scheduling core (SQL).
Run once in the Supabase SQL editor; `scripts/dev.py db-migrate` prints it.
"""

SCHEMA_SQL = """
create type plan_type as enum ('strict', 'flexible');

create table workout_routines (
  id uuid primary key default gen_random_uuid(),
  user_id uuid not null,
  name text not null,
  description text,
  days_per_week int,
  is_public boolean default false,
  is_active boolean default true,
  created_at timestamptz default now(),
  updated_at timestamptz default now()
);

-- one row per day-in-sequence, day_number 1..N without gaps
create table routine_days (
  id uuid primary key default gen_random_uuid(),
  routine_id uuid references workout_routines(id) on delete cascade,
  day_number int not null,
  name text not null,
  description text,
  created_at timestamptz default now()
);

create table routine_exercises (
  id uuid primary key default gen_random_uuid(),
  routine_day_id uuid references routine_days(id) on delete cascade,
  exercise_name text not null,
  sets int,
  reps text,
  weight_suggestion text,
  rest_time_seconds int,
  notes text,
  order_index int,
  created_at timestamptz default now()
);

create table client_routine_assignments (
  id uuid primary key default gen_random_uuid(),
  client_id uuid not null,
  routine_id uuid references workout_routines(id),
  plan_type plan_type default 'strict',
  -- only written by plan progression, always in [0, routine day count)
  current_day_index int default 0,
  start_date date default current_date,
  is_active boolean default true,
  created_at timestamptz default now(),
  updated_at timestamptz default now()
);

create table workout_sessions (
  id uuid primary key default gen_random_uuid(),
  user_id uuid not null,
  name text not null,
  routine_id uuid references workout_routines(id),
  routine_day_id uuid references routine_days(id),
  assignment_id uuid references client_routine_assignments(id),
  start_time timestamptz,
  end_time timestamptz,
  notes text,
  created_at timestamptz default now()
);

create table workout_schedule (
  id uuid primary key default gen_random_uuid(),
  assignment_id uuid references client_routine_assignments(id) on delete cascade,
  client_id uuid not null,
  scheduled_date date not null,
  is_rest_day boolean default false,
  is_completed boolean default false,
  was_skipped boolean default false,
  routine_day_id uuid references routine_days(id),
  workout_session_id uuid references workout_sessions(id),
  created_at timestamptz default now(),
  unique (assignment_id, scheduled_date)
);
"""
