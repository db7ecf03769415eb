HEMOGLOBIN = "718-7"
HEMATOCRIT = "4544-3"
MCV = "787-2"
GLUCOSE = "2345-7"
HBA1C = "4548-4"
INSULIN = "20448-7"
BUN = "3094-0"
CREATININE = "2160-0"
EGFR = "33914-3"
TOTAL_CHOLESTEROL = "2093-3"
TRIGLYCERIDES = "2571-8"
HDL = "2085-9"
LDL = "13457-7"
TSH = "3016-3"
FREE_T4 = "3024-7"
VITAMIN_D = "1989-3"
VITAMIN_B12 = "2132-9"
FOLATE = "2284-8"
IRON = "2498-4"
FERRITIN = "2276-4"
HS_CRP = "30522-7"
SYSTOLIC_BP = "8480-6"


BIOMARKERS = [
    {"code": HEMOGLOBIN, "name": "Hemoglobin", "category": "Complete Blood Count", "unit": "g/dL",
     "range": (12.0, 16.0), "aliases": ["hemoglobin", "haemoglobin", "hgb", "hb"]},
    {"code": HEMATOCRIT, "name": "Hematocrit", "category": "Complete Blood Count", "unit": "%",
     "range": (36.0, 48.0), "aliases": ["hematocrit", "haematocrit", "hct"]},
    {"code": "6690-2", "name": "White Blood Cells", "category": "Complete Blood Count", "unit": "10^3/µL",
     "range": (4.5, 11.0), "aliases": ["white blood cells", "white blood cell count", "wbc", "leukocytes"]},
    {"code": "789-8", "name": "Red Blood Cells", "category": "Complete Blood Count", "unit": "10^6/µL",
     "range": (4.2, 5.8), "aliases": ["red blood cells", "red blood cell count", "rbc", "erythrocytes"]},
    {"code": "777-3", "name": "Platelets", "category": "Complete Blood Count", "unit": "10^3/µL",
     "range": (150.0, 450.0), "aliases": ["platelets", "platelet count", "plt"]},
    {"code": MCV, "name": "Mean Corpuscular Volume", "category": "Complete Blood Count", "unit": "fL",
     "range": (80.0, 100.0), "aliases": ["mcv", "mean corpuscular volume"]},
    {"code": "785-6", "name": "Mean Corpuscular Hemoglobin", "category": "Complete Blood Count", "unit": "pg",
     "range": (27.0, 33.0), "aliases": ["mch", "mean corpuscular hemoglobin"]},
    {"code": "786-4", "name": "Mean Corpuscular Hemoglobin Concentration", "category": "Complete Blood Count",
     "unit": "g/dL", "range": (32.0, 36.0), "aliases": ["mchc", "mean corpuscular hemoglobin concentration"]},
    {"code": "788-0", "name": "Red Cell Distribution Width", "category": "Complete Blood Count", "unit": "%",
     "range": (11.5, 14.5), "aliases": ["rdw", "red cell distribution width"]},
    {"code": "751-8", "name": "Neutrophils", "category": "Complete Blood Count", "unit": "%",
     "range": (40.0, 70.0), "aliases": ["neutrophils"]},
    {"code": "731-0", "name": "Lymphocytes", "category": "Complete Blood Count", "unit": "%",
     "range": (20.0, 40.0), "aliases": ["lymphocytes"]},
    {"code": GLUCOSE, "name": "Glucose", "category": "Metabolic Panel", "unit": "mg/dL",
     "range": (70.0, 99.0), "aliases": ["glucose", "fasting glucose", "glucose fasting", "blood glucose"]},
    {"code": HBA1C, "name": "HbA1c", "category": "Diabetes", "unit": "%",
     "range": (4.0, 5.6), "aliases": ["hba1c", "a1c", "hemoglobin a1c", "glycated hemoglobin", "glycohemoglobin"]},
    {"code": INSULIN, "name": "Insulin", "category": "Diabetes", "unit": "µIU/mL",
     "range": (2.6, 24.9), "aliases": ["insulin", "fasting insulin"]},
    {"code": BUN, "name": "Blood Urea Nitrogen", "category": "Kidney Function", "unit": "mg/dL",
     "range": (7.0, 20.0), "aliases": ["bun", "blood urea nitrogen", "urea nitrogen"]},
    {"code": CREATININE, "name": "Creatinine", "category": "Kidney Function", "unit": "mg/dL",
     "range": (0.6, 1.2), "aliases": ["creatinine", "serum creatinine", "creat"]},
    {"code": EGFR, "name": "eGFR", "category": "Kidney Function", "unit": "mL/min/1.73m²",
     "range": (90.0, 200.0), "aliases": ["egfr", "estimated gfr", "gfr"]},
    {"code": "2951-2", "name": "Sodium", "category": "Electrolytes", "unit": "mmol/L",
     "range": (135.0, 145.0), "aliases": ["sodium", "na"]},
    {"code": "2823-3", "name": "Potassium", "category": "Electrolytes", "unit": "mmol/L",
     "range": (3.5, 5.0), "aliases": ["potassium", "k"]},
    {"code": "2075-0", "name": "Chloride", "category": "Electrolytes", "unit": "mmol/L",
     "range": (98.0, 107.0), "aliases": ["chloride", "cl"]},
    {"code": "2028-9", "name": "Carbon Dioxide", "category": "Electrolytes", "unit": "mmol/L",
     "range": (22.0, 29.0), "aliases": ["co2", "carbon dioxide", "bicarbonate"]},
    {"code": "17861-6", "name": "Calcium", "category": "Metabolic Panel", "unit": "mg/dL",
     "range": (8.5, 10.5), "aliases": ["calcium", "ca"]},
    {"code": "2885-2", "name": "Total Protein", "category": "Protein", "unit": "g/dL",
     "range": (6.0, 8.3), "aliases": ["total protein", "protein"]},
    {"code": "1751-7", "name": "Albumin", "category": "Protein", "unit": "g/dL",
     "range": (3.5, 5.0), "aliases": ["albumin"]},
    {"code": "1975-2", "name": "Total Bilirubin", "category": "Liver Function", "unit": "mg/dL",
     "range": (0.1, 1.2), "aliases": ["bilirubin", "total bilirubin"]},
    {"code": "1742-6", "name": "ALT", "category": "Liver Function", "unit": "U/L",
     "range": (7.0, 56.0), "aliases": ["alt", "sgpt", "alanine aminotransferase"]},
    {"code": "1920-8", "name": "AST", "category": "Liver Function", "unit": "U/L",
     "range": (10.0, 40.0), "aliases": ["ast", "sgot", "aspartate aminotransferase"]},
    {"code": "6768-6", "name": "Alkaline Phosphatase", "category": "Liver Function", "unit": "U/L",
     "range": (44.0, 147.0), "aliases": ["alp", "alkaline phosphatase"]},
    {"code": TOTAL_CHOLESTEROL, "name": "Total Cholesterol", "category": "Lipid Panel", "unit": "mg/dL",
     "range": (0.0, 200.0), "aliases": ["cholesterol", "total cholesterol", "cholesterol total"]},
    {"code": TRIGLYCERIDES, "name": "Triglycerides", "category": "Lipid Panel", "unit": "mg/dL",
     "range": (0.0, 150.0), "aliases": ["triglycerides", "triglyceride", "tg"]},
    {"code": HDL, "name": "HDL Cholesterol", "category": "Lipid Panel", "unit": "mg/dL",
     "range": (40.0, 100.0), "aliases": ["hdl", "hdl cholesterol", "hdl-c", "high density lipoprotein"]},
    {"code": LDL, "name": "LDL Cholesterol", "category": "Lipid Panel", "unit": "mg/dL",
     "range": (0.0, 100.0),
     "aliases": ["ldl", "ldl cholesterol", "ldl-c", "ldl calculated", "ldl-calculated", "low density lipoprotein"]},
    {"code": "2091-7", "name": "VLDL Cholesterol", "category": "Lipid Panel", "unit": "mg/dL",
     "range": (5.0, 40.0), "aliases": ["vldl", "vldl cholesterol"]},
    {"code": "43396-1", "name": "Non-HDL Cholesterol", "category": "Lipid Panel", "unit": "mg/dL",
     "range": (0.0, 130.0), "aliases": ["non-hdl cholesterol", "non hdl cholesterol"]},
    {"code": TSH, "name": "TSH", "category": "Thyroid", "unit": "mIU/L",
     "range": (0.4, 4.0), "aliases": ["tsh", "thyroid stimulating hormone", "thyrotropin"]},
    {"code": FREE_T4, "name": "Free T4", "category": "Thyroid", "unit": "ng/dL",
     "range": (0.8, 1.8), "aliases": ["free t4", "ft4", "free thyroxine"]},
    {"code": "30123-3", "name": "Free T3", "category": "Thyroid", "unit": "pg/mL",
     "range": (2.3, 4.2), "aliases": ["free t3", "ft3"]},
    {"code": "3026-2", "name": "Total T4", "category": "Thyroid", "unit": "µg/dL",
     "range": (5.0, 12.0), "aliases": ["t4", "total t4", "thyroxine"]},
    {"code": "3053-6", "name": "Total T3", "category": "Thyroid", "unit": "ng/dL",
     "range": (80.0, 200.0), "aliases": ["t3", "total t3"]},
    {"code": VITAMIN_D, "name": "Vitamin D", "category": "Vitamins", "unit": "ng/mL",
     "range": (30.0, 100.0), "aliases": ["vitamin d", "25-oh vitamin d", "25-hydroxyvitamin d", "vit d"]},
    {"code": VITAMIN_B12, "name": "Vitamin B12", "category": "Vitamins", "unit": "pg/mL",
     "range": (200.0, 900.0), "aliases": ["vitamin b12", "b12", "cobalamin"]},
    {"code": FOLATE, "name": "Folate", "category": "Vitamins", "unit": "ng/mL",
     "range": (3.0, 20.0), "aliases": ["folate", "folic acid"]},
    {"code": IRON, "name": "Iron", "category": "Iron Studies", "unit": "µg/dL",
     "range": (60.0, 170.0), "aliases": ["iron", "serum iron"]},
    {"code": FERRITIN, "name": "Ferritin", "category": "Iron Studies", "unit": "ng/mL",
     "range": (20.0, 250.0), "aliases": ["ferritin"]},
    {"code": HS_CRP, "name": "High Sensitivity CRP", "category": "Inflammation", "unit": "mg/L",
     "range": (0.0, 3.0), "aliases": ["hs-crp", "hscrp", "crp", "c-reactive protein", "high sensitivity crp"]},
    {"code": SYSTOLIC_BP, "name": "Systolic Blood Pressure", "category": "Vitals", "unit": "mmHg",
     "range": (90.0, 120.0), "aliases": ["systolic blood pressure", "systolic bp", "blood pressure", "sbp"]},
    {"code": "8462-4", "name": "Diastolic Blood Pressure", "category": "Vitals", "unit": "mmHg",
     "range": (60.0, 80.0), "aliases": ["diastolic blood pressure", "diastolic bp", "dbp"]},
    {"code": "5792-7", "name": "Urine Glucose", "category": "Urinalysis", "unit": "mg/dL",
     "range": (0.0, 15.0), "aliases": ["urine glucose"]},
]


# Most specific matching entry wins; ties go to the earlier entry.
DEMOGRAPHIC_RANGES = [
    {"code": HEMOGLOBIN, "sex": "female", "min_age": None, "max_age": None, "range": (12.0, 15.5)},
    {"code": HEMOGLOBIN, "sex": "male", "min_age": None, "max_age": None, "range": (13.5, 17.5)},
    {"code": HEMATOCRIT, "sex": "female", "min_age": None, "max_age": None, "range": (35.5, 44.9)},
    {"code": HEMATOCRIT, "sex": "male", "min_age": None, "max_age": None, "range": (38.3, 48.6)},
    {"code": CREATININE, "sex": "female", "min_age": None, "max_age": None, "range": (0.5, 1.1)},
    {"code": CREATININE, "sex": "male", "min_age": None, "max_age": None, "range": (0.7, 1.3)},
    {"code": FERRITIN, "sex": "female", "min_age": None, "max_age": None, "range": (12.0, 150.0)},
    {"code": FERRITIN, "sex": "male", "min_age": None, "max_age": None, "range": (24.0, 336.0)},
    {"code": EGFR, "sex": None, "min_age": 70, "max_age": None, "range": (60.0, 200.0)},
]


# value_in_to_unit = value_in_from_unit * factor; the reverse direction is derived.
# Entries without a code apply to every biomarker.
UNIT_CONVERSIONS = [
    {"code": None, "from": "g/L", "to": "g/dL", "factor": 0.1},
    {"code": None, "from": "mg/L", "to": "mg/dL", "factor": 0.1},
    {"code": None, "from": "µg/L", "to": "ng/mL", "factor": 1.0},
    {"code": None, "from": "ng/L", "to": "pg/mL", "factor": 1.0},
    {"code": None, "from": "K/µL", "to": "10^3/µL", "factor": 1.0},
    {"code": None, "from": "10^9/L", "to": "10^3/µL", "factor": 1.0},
    {"code": None, "from": "x10^3/µL", "to": "10^3/µL", "factor": 1.0},
    {"code": None, "from": "M/µL", "to": "10^6/µL", "factor": 1.0},
    {"code": None, "from": "10^12/L", "to": "10^6/µL", "factor": 1.0},
    {"code": None, "from": "mIU/L", "to": "µIU/mL", "factor": 1.0},
    {"code": HEMOGLOBIN, "from": "mmol/L", "to": "g/dL", "factor": 1.611},
    {"code": GLUCOSE, "from": "mmol/L", "to": "mg/dL", "factor": 18.0182},
    {"code": CREATININE, "from": "mg/dL", "to": "µmol/L", "factor": 88.4},
    {"code": TOTAL_CHOLESTEROL, "from": "mmol/L", "to": "mg/dL", "factor": 38.67},
    {"code": LDL, "from": "mmol/L", "to": "mg/dL", "factor": 38.67},
    {"code": HDL, "from": "mmol/L", "to": "mg/dL", "factor": 38.67},
    {"code": "43396-1", "from": "mmol/L", "to": "mg/dL", "factor": 38.67},
    {"code": TRIGLYCERIDES, "from": "mmol/L", "to": "mg/dL", "factor": 88.5},
    {"code": BUN, "from": "mmol/L", "to": "mg/dL", "factor": 2.801},
    {"code": "17861-6", "from": "mmol/L", "to": "mg/dL", "factor": 4.008},
    {"code": VITAMIN_D, "from": "nmol/L", "to": "ng/mL", "factor": 0.4006},
    {"code": VITAMIN_B12, "from": "pmol/L", "to": "pg/mL", "factor": 1.355},
    {"code": FOLATE, "from": "nmol/L", "to": "ng/mL", "factor": 0.4413},
    {"code": IRON, "from": "µmol/L", "to": "µg/dL", "factor": 5.585},
    {"code": INSULIN, "from": "µIU/mL", "to": "pmol/L", "factor": 6.0},
    {"code": FREE_T4, "from": "pmol/L", "to": "ng/dL", "factor": 0.0777},
    {"code": HS_CRP, "from": "mg/dL", "to": "mg/L", "factor": 10.0},
]


KNOWN_RELATIONSHIPS = [
    {"codes": (GLUCOSE, HBA1C), "direction": "positive"},
    {"codes": (LDL, TOTAL_CHOLESTEROL), "direction": "positive"},
    {"codes": (HEMOGLOBIN, HEMATOCRIT), "direction": "positive"},
    {"codes": (CREATININE, EGFR), "direction": "negative"},
]
