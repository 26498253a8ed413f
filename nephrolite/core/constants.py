from typing import Literal

Gender = Literal["Male", "Female"]
PatientStatus = Literal["OPD", "IPD", "Discharged"]
ResidenceType = Literal["Rural", "Urban", "Semi-Urban", "Other", "Not Set"]
VisitType = Literal["OPD", "IPD", "Emergency", "Consultation", "Routine", "Proxy", "Missed", "Admission"]
AppointmentStatus = Literal["Scheduled", "Completed", "Cancelled", "Waiting", "Not Showed", "Admitted", "Now Serving"]
DialysisType = Literal["Hemodialysis", "Peritoneal Dialysis"]
SessionStatus = Literal["Active", "Completed", "Cancelled"]
AccessType = Literal["AV Fistula", "AV Graft", "Catheter", "PD Catheter"]
ResultType = Literal["numeric", "text", "select"]
TemplateType = Literal["Opinion Report", "Discharge Summary"]
DiagnosisKind = Literal["Primary", "Secondary"]
Role = Literal["doctor", "nurse", "admin", "staff"]
InvestigationGroup = Literal[
    "Hematological", "Biochemistry", "Radiology", "Pathology",
    "Special Investigations", "Urine Analysis", "Serology", "Microbiology", "Imported",
]
InterventionType = Literal[
    "Kidney Biopsy", "Temporary Catheter", "Cuffed Catheter", "CAPD Catheter",
    "AV Fistula", "Endovascular Intervention", "Plasmapheresis", "Other",
]

BloodGroup = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-", "Unknown"]
AppointmentType = Literal[
    "Routine Checkup", "Follow-up", "Dialysis Session", "Consultation", "Emergency",
    "Lab Results Review", "Transplant Evaluation", "GN Monitoring Visit",
]
PatientGroup = Literal[
    "Peritoneal Dialysis", "Chronic Kidney disease", "Hemodialysis",
    "Glomerulonephritis", "Kidney transplant", "ADPKD", "Misc", "Infection",
]

# built-in investigation master list: (code, name, group)
INVESTIGATION_MASTER_LIST = [
    ("hem_001", "Hemoglobin (Hb)", "Hematological"),
    ("hem_002", "Total Leucocyte Count (TLC)", "Hematological"),
    ("hem_003", "Differential Leucocyte Count (DLC)", "Hematological"),
    ("hem_004", "Platelet Count", "Hematological"),
    ("hem_005", "Erythrocyte Sedimentation Rate (ESR)", "Hematological"),
    ("hem_006", "Prothrombin Time (PT)", "Hematological"),
    ("hem_007", "Activated Partial Thromboplastin Time (aPTT)", "Hematological"),
    ("hem_008", "Reticulocyte Count", "Hematological"),
    ("hem_009", "Peripheral Blood Smear (PBS)", "Hematological"),
    ("hem_010", "INR", "Hematological"),
    ("hem_011", "Complete Blood Count (CBC)", "Hematological"),
    ("bio_001", "Blood Urea", "Biochemistry"),
    ("bio_002", "Serum Creatinine", "Biochemistry"),
    ("bio_003", "Serum Sodium (Na+)", "Biochemistry"),
    ("bio_004", "Serum Potassium (K+)", "Biochemistry"),
    ("bio_005", "Serum Bicarbonate", "Biochemistry"),
    ("bio_006", "Serum Calcium", "Biochemistry"),
    ("bio_007", "Serum Phosphate", "Biochemistry"),
    ("bio_008", "Serum Uric Acid", "Biochemistry"),
    ("bio_009", "Alkaline Phosphatase (ALP)", "Biochemistry"),
    ("bio_010", "Total Protein", "Biochemistry"),
    ("bio_011", "Serum Albumin", "Biochemistry"),
    ("bio_012", "Fasting Blood Sugar (FBS)", "Biochemistry"),
    ("bio_013", "Post Prandial Blood Sugar (PPBS)", "Biochemistry"),
    ("bio_014", "HbA1c", "Biochemistry"),
    ("bio_015", "Lipid Profile", "Biochemistry"),
    ("bio_016", "Liver Function Test (LFT)", "Biochemistry"),
    ("bio_017", "Kidney Function Test (KFT)", "Biochemistry"),
    ("bio_018", "eGFR", "Biochemistry"),
    ("rad_001", "USG KUB", "Radiology"),
    ("rad_002", "Chest X-Ray (CXR)", "Radiology"),
    ("rad_003", "CT KUB (NCCT)", "Radiology"),
    ("rad_004", "CT Abdomen", "Radiology"),
    ("rad_005", "MRI Abdomen", "Radiology"),
    ("ser_001", "HBsAg", "Serology"),
    ("ser_002", "Anti-HCV", "Serology"),
    ("ser_003", "HIV I & II", "Serology"),
    ("ser_004", "ANA (Antinuclear Antibody)", "Serology"),
    ("ser_005", "dsDNA", "Serology"),
    ("ser_006", "C3", "Serology"),
    ("ser_007", "C4", "Serology"),
    ("ser_008", "ANCA (p-ANCA, c-ANCA)", "Serology"),
    ("ser_009", "Anti-GBM Antibody", "Serology"),
    ("ser_010", "Anti PLA2R antibody", "Serology"),
    ("urn_001", "Urine Routine & Microscopy (R/M)", "Urine Analysis"),
    ("urn_002", "Urine Culture & Sensitivity", "Urine Analysis"),
    ("urn_003", "24-hour Urine Protein", "Urine Analysis"),
    ("urn_004", "Urine Spot Protein/Creatinine Ratio (PCR)", "Urine Analysis"),
    ("spc_001", "Kidney Biopsy", "Special Investigations"),
    ("spc_002", "ECG", "Special Investigations"),
    ("spc_003", "2D Echocardiography", "Special Investigations"),
    ("mic_001", "Blood Culture & Sensitivity", "Microbiology"),
]

# (name, group, test codes)
INVESTIGATION_PANELS = [
    ("Hematology Basic", "Hematological", ["hem_001", "hem_002", "hem_003", "hem_004"]),
    ("Hematology Extended", "Hematological", ["hem_001", "hem_002", "hem_003", "hem_004", "hem_005", "hem_010", "hem_006"]),
    ("Coagulation Profile", "Hematological", ["hem_006", "hem_007", "hem_010", "hem_004"]),
    ("Complete Anemia Profile", "Hematological", ["hem_001", "hem_002", "hem_003", "hem_004", "hem_008", "hem_009"]),
    ("Renal Function Basic (KFT)", "Biochemistry", ["bio_001", "bio_002", "bio_003", "bio_004", "bio_005"]),
    ("Renal Function Extended", "Biochemistry", ["bio_001", "bio_002", "bio_003", "bio_004", "bio_005", "bio_006", "bio_007", "bio_008"]),
    ("Liver Function Test (LFT)", "Biochemistry", ["bio_010", "bio_011", "bio_016"]),
    ("Diabetic Profile", "Biochemistry", ["bio_012", "bio_013", "bio_014"]),
    ("Metabolic Bone Disease (MBD) Screen", "Biochemistry", ["bio_006", "bio_007", "bio_009"]),
    ("Viral Markers", "Serology", ["ser_001", "ser_002", "ser_003"]),
    ("Glomerulonephritis (GN) Basic", "Serology", ["ser_004", "ser_006", "ser_007"]),
    ("Glomerulonephritis (GN) Extended", "Serology", ["ser_004", "ser_005", "ser_006", "ser_007", "ser_008", "ser_009"]),
    ("Basic Urinalysis", "Urine Analysis", ["urn_001"]),
    ("Proteinuria Screen", "Urine Analysis", ["urn_001", "urn_004"]),
]
