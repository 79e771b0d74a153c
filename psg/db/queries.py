"""
SQL Queries against the Moodle and Behaviour Analytics tables.

Table names carry the Moodle prefix through the ``{prefix}`` placeholder;
the membership and common-link queries also take a ``{table}`` placeholder
so the manual and automatic clustering tables share one statement.

Usage:
    from psg.db.queries import QUERIES

    sql = QUERIES["course_modules"].format(prefix="mdl_")
    result = conn.execute(text(sql), params)
"""

from __future__ import annotations

# Moodle context level of a course
CONTEXT_COURSE = 50

# Module types without a view page (never clickable)
NO_VIEW_MODULES = ("label",)

# =============================================================================
# COURSE STRUCTURE
# =============================================================================

GET_FORMAT_COURSES = """
    SELECT c.id
    FROM {prefix}course c
    WHERE c.format = :format
    ORDER BY c.sortorder, c.id
"""

GET_COURSE_SECTIONS = """
    SELECT cs.id, cs.section, cs.name, cs.sequence
    FROM {prefix}course_sections cs
    WHERE cs.course = :course_id
    ORDER BY cs.section
"""

GET_COURSE_MODULES = """
    SELECT cm.id, m.name AS modname, cm.instance, cm.section AS section_id
    FROM {prefix}course_modules cm
    JOIN {prefix}modules m ON m.id = cm.module
    WHERE cm.course = :course_id
      AND cm.visible = 1
      AND cm.deletioninprogress = 0
      AND m.visible = 1
"""

# Students of the course plus anyone with imported analytics data
GET_COURSE_LEARNERS = """
    SELECT ra.userid
    FROM {prefix}role_assignments ra
    JOIN {prefix}context ctx ON ctx.id = ra.contextid AND ctx.contextlevel = :context_level
    JOIN {prefix}role r ON r.id = ra.roleid
    WHERE ctx.instanceid = :course_id
      AND r.shortname = 'student'
    UNION
    SELECT bi.userid
    FROM {prefix}block_behaviour_imported bi
    WHERE bi.courseid = :course_id
"""

# =============================================================================
# MODULE CONTENT
# =============================================================================

GET_PAGE_CONTENT = """
    SELECT p.content FROM {prefix}page p WHERE p.id = :instance
"""

GET_URL_EXTERNAL = """
    SELECT u.externalurl FROM {prefix}url u WHERE u.id = :instance
"""

# =============================================================================
# BEHAVIOUR ANALYTICS
# =============================================================================

COUNT_ANALYTICS_BLOCKS = """
    SELECT COUNT(1)
    FROM {prefix}block_instances bi
    JOIN {prefix}context ctx ON ctx.id = bi.parentcontextid AND ctx.contextlevel = :context_level
    WHERE bi.blockname = 'behaviour'
      AND ctx.instanceid = :course_id
"""

GET_PREDICTION = """
    SELECT bi.prediction
    FROM {prefix}block_behaviour_installed bi
    WHERE bi.courseid = :course_id
"""

GET_MIN_MEMBER_ITERATION = """
    SELECT MIN(m.iteration)
    FROM {prefix}{table} m
    WHERE m.courseid = :course_id
      AND m.userid = :analysis_id
      AND m.coordsid = :coords_id
      AND m.clusterid = :cluster_id
      AND m.studentid = :user_id
"""

GET_MEMBER_CLUSTER = """
    SELECT m.clusternum
    FROM {prefix}{table} m
    WHERE m.courseid = :course_id
      AND m.userid = :analysis_id
      AND m.coordsid = :coords_id
      AND m.clusterid = :cluster_id
      AND m.studentid = :user_id
      AND m.iteration = :iteration
"""

GET_COMMON_LINKS = """
    SELECT l.link, l.weight
    FROM {prefix}{table} l
    WHERE l.courseid = :course_id
      AND l.userid = :analysis_id
      AND l.coordsid = :coords_id
      AND l.clusterid = :cluster_id
      AND l.clusternum = :cluster_number
    ORDER BY l.id
"""

GET_SURVEY_ID = """
    SELECT s.id FROM {prefix}block_behaviour_surveys s WHERE s.title = :title
"""

GET_SURVEY_RESPONSES = """
    SELECT r.response
    FROM {prefix}block_behaviour_survey_rsps r
    WHERE r.courseid = :course_id
      AND r.studentid = :user_id
      AND r.surveyid = :survey_id
    ORDER BY r.attempt DESC, r.qorder
"""

GET_LATEST_PSG_TOGGLE = """
    SELECT l.psgon
    FROM {prefix}block_behaviour_psg_log l
    WHERE l.courseid = :course_id
      AND l.userid = :user_id
    ORDER BY l.time DESC
    LIMIT 1
"""

# Clustering tables: (membership, common links)
MANUAL_TABLES = ("block_behaviour_man_members", "block_behaviour_man_cmn_link")
AUTOMATIC_TABLES = ("block_behaviour_members", "block_behaviour_common_links")

QUERIES = {
    "format_courses": GET_FORMAT_COURSES,
    "course_sections": GET_COURSE_SECTIONS,
    "course_modules": GET_COURSE_MODULES,
    "course_learners": GET_COURSE_LEARNERS,
    "page_content": GET_PAGE_CONTENT,
    "url_external": GET_URL_EXTERNAL,
    "analytics_blocks": COUNT_ANALYTICS_BLOCKS,
    "prediction": GET_PREDICTION,
    "min_member_iteration": GET_MIN_MEMBER_ITERATION,
    "member_cluster": GET_MEMBER_CLUSTER,
    "common_links": GET_COMMON_LINKS,
    "survey_id": GET_SURVEY_ID,
    "survey_responses": GET_SURVEY_RESPONSES,
    "latest_psg_toggle": GET_LATEST_PSG_TOGGLE,
}
