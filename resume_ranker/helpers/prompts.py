from resume_ranker.models.models import Candidate, JobRequirement

SYSTEM_PREAMBLE = "You are a resume analysis expert. Respond only in JSON format."

PARSE_PROMPT = """Analyze the resume content below and extract it as JSON.

RESUME CONTENT:
{resume}

Response format (JSON):
{{
    "fullName": "Candidate's full name",
    "email": "Email address",
    "phone": "Phone number",
    "skills": [
        {{
            "name": "Skill name",
            "yearsOfExperience": 0,
            "level": "Beginner/Intermediate/Advanced/Expert"
        }}
    ],
    "experiences": [
        {{
            "companyName": "Company name",
            "position": "Position",
            "startDate": "YYYY-MM",
            "endDate": "YYYY-MM or null (if ongoing)",
            "description": "Short description",
            "isCurrent": true/false
        }}
    ],
    "education": {{
        "institution": "School name",
        "degree": "Bachelor/Master/PhD",
        "fieldOfStudy": "Field of study",
        "graduationYear": 2020
    }}
}}"""

REQUIREMENTS_BLOCK = """## Job Requirements
- Position: {job_title}
- Description: {description}
- Required Skills: {required_skills}
- Preferred Skills: {preferred_skills}
- Minimum Experience: {min_years} years
- Maximum Experience: {max_years} years
- Required Degree: {required_degree}
- Preferred Fields of Study: {preferred_fields}

## Scoring Weights
- Skills Weight: {skills_weight}%
- Experience Weight: {experience_weight}%
- Education Weight: {education_weight}%"""

SCORING_PROMPT = """Analyze the candidate below against the job requirements and score them.

## Candidate
- Name: {full_name}
- Skills: {candidate_skills}
- Total Experience: {total_years:.1f} years
- Number of Companies: {company_count}
- Education: {degree} - {field_of_study}

{requirements}

Response format (JSON):
{{
    "skillsScore": score between 0-100,
    "experienceScore": score between 0-100,
    "educationScore": score between 0-100,
    "matchedSkills": ["list of matched skills"],
    "missingSkills": ["list of missing skills"],
    "totalYearsExperience": number,
    "numberOfCompanies": number,
    "averageYearsPerCompany": decimal number,
    "hasRelevantExperience": true/false,
    "hasRequiredDegree": true/false,
    "isRelevantField": true/false,
    "actualDegree": "candidate's degree",
    "actualField": "candidate's field of study",
    "summary": "Overall assessment of the candidate (2-3 sentences)",
    "strengths": "Strengths",
    "weaknesses": "Weaknesses / gaps"
}}

Scoring rules:
- skillsScore: how many of the required skills does the candidate have? (matchedSkills.count / requiredSkills.count * 100)
- experienceScore: 100 if the years of experience are sufficient, otherwise proportional
- educationScore: based on degree level and field relevance"""

DIRECT_SCORING_PROMPT = """Read the resume content below, extract the candidate's details and analyze them against the job requirements.

## Resume Content (Raw Text)
{resume}

{requirements}

Extract the following information from the resume and score it against the job requirements.
Respond ONLY in JSON, write nothing else:

{{
    "candidateName": "candidate's full name",
    "candidateEmail": "email address or null",
    "candidatePhone": "phone number or null",
    "skillsScore": score between 0-100,
    "experienceScore": score between 0-100,
    "educationScore": score between 0-100,
    "matchedSkills": ["skills found in the resume that the job requires"],
    "missingSkills": ["skills the job requires that are not in the resume"],
    "totalYearsExperience": total years of experience (number),
    "numberOfCompanies": number of companies worked at (number),
    "averageYearsPerCompany": average years per company (decimal number),
    "hasRelevantExperience": has relevant experience (true/false),
    "hasRequiredDegree": has the required degree (true/false),
    "isRelevantField": is the field of study relevant (true/false),
    "actualDegree": "candidate's degree",
    "actualField": "candidate's field of study",
    "summary": "Overall assessment of the candidate (2-3 sentences)",
    "strengths": "Strengths",
    "weaknesses": "Weaknesses / gaps"
}}

Scoring rules:
- skillsScore: how many required skills appear in the resume? matched count / required count * 100
- experienceScore: 100 if the years of experience are sufficient, otherwise proportional (candidate_years / required_years * 100)
- educationScore: 0-100 based on degree level and field relevance"""

NOT_SPECIFIED = "Not specified"


def build_parse_prompt(raw_text: str) -> str:
    return PARSE_PROMPT.format(resume=raw_text)


def build_requirements_block(requirement: JobRequirement) -> str:
    return REQUIREMENTS_BLOCK.format(
        job_title=requirement.job_title,
        description=requirement.description,
        required_skills=", ".join(requirement.required_skills),
        preferred_skills=", ".join(requirement.preferred_skills),
        min_years=requirement.min_years_of_experience,
        max_years=requirement.max_years_of_experience if requirement.max_years_of_experience is not None else NOT_SPECIFIED,
        required_degree=requirement.required_degree,
        preferred_fields=", ".join(requirement.preferred_fields_of_study),
        skills_weight=requirement.skills_weight,
        experience_weight=requirement.experience_weight,
        education_weight=requirement.education_weight,
    )


def build_scoring_prompt(candidate: Candidate, requirement: JobRequirement) -> str:
    education = candidate.education
    return SCORING_PROMPT.format(
        full_name=candidate.full_name,
        candidate_skills=", ".join(s.name for s in candidate.skills),
        total_years=candidate.total_years_of_experience,
        company_count=len(candidate.experiences),
        degree=(education.degree if education and education.degree else NOT_SPECIFIED),
        field_of_study=(education.field_of_study if education and education.field_of_study else NOT_SPECIFIED),
        requirements=build_requirements_block(requirement),
    )


def build_direct_scoring_prompt(raw_text: str, requirement: JobRequirement) -> str:
    return DIRECT_SCORING_PROMPT.format(
        resume=raw_text,
        requirements=build_requirements_block(requirement),
    )


def uses_direct_scoring(candidate: Candidate) -> bool:
    return not candidate.parsed or not candidate.full_name


def select_scoring_prompt(candidate: Candidate, requirement: JobRequirement) -> str:
    """Raw-text prompt for unparsed or nameless candidates, structured otherwise."""
    if uses_direct_scoring(candidate):
        return build_direct_scoring_prompt(candidate.raw_content, requirement)
    return build_scoring_prompt(candidate, requirement)
