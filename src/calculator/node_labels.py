"""Human-readable labels for primary graph nodes."""

from typing import Dict

NODE_LABELS: Dict[str, str] = {
    # Form 1040
    "form1040.line1a": "Wages (W-2 Box 1)",
    "form1040.line1z": "Total wages",
    "form1040.line2a": "Tax-exempt interest",
    "form1040.line2b": "Taxable interest",
    "form1040.line3a": "Qualified dividends",
    "form1040.line3b": "Ordinary dividends",
    "form1040.line7": "Capital gain or (loss)",
    "form1040.line8": "Additional income from Schedule 1",
    "form1040.line9": "Total income",
    "form1040.line10": "Adjustments to income",
    "form1040.line11": "Adjusted gross income",
    "form1040.line12": "Standard or itemized deduction",
    "form1040.line13": "Qualified business income deduction",
    "form1040.line14": "Total deductions",
    "form1040.line15": "Taxable income",
    "form1040.line16": "Tax",
    "form1040.line17": "Alternative minimum tax",
    "form1040.line18": "Tax plus AMT",
    "form1040.line19": "Child tax credit / credit for other dependents",
    "form1040.line20": "Other nonrefundable credits",
    "form1040.line21": "Total nonrefundable credits",
    "form1040.line22": "Tax after credits",
    "form1040.line23": "Other taxes",
    "form1040.line24": "Total tax",
    "form1040.line25a": "Federal withholding (W-2)",
    "form1040.line25b": "Federal withholding (1099)",
    "form1040.line25d": "Total federal withholding",
    "form1040.line26": "Estimated tax payments",
    "form1040.line27": "Earned income credit",
    "form1040.line28": "Additional child tax credit",
    "form1040.line29": "American opportunity credit",
    "form1040.line31": "Other refundable credits",
    "form1040.line32": "Total other payments and refundable credits",
    "form1040.line33": "Total payments",
    "form1040.line34": "Overpaid",
    "form1040.line37": "Amount you owe",
    "deduction.standard": "Standard deduction",
    "credits.earnedIncome": "Earned income",
    # Schedule 1
    "schedule1.line3": "Business income or (loss)",
    "schedule1.line5": "Rental real estate, royalties, partnerships",
    "schedule1.line10": "Total additional income",
    "schedule1.line15": "Deductible part of self-employment tax",
    "schedule1.line26": "Total adjustments to income",
    # Schedule 3
    "schedule3.line11": "Excess social security tax withheld",
    # Schedule A
    "scheduleA.line1": "Medical and dental expenses",
    "scheduleA.line3": "Medical expense AGI floor",
    "scheduleA.line4": "Deductible medical expenses",
    "scheduleA.line5a": "State and local income taxes",
    "scheduleA.line5b": "State and local real estate taxes",
    "scheduleA.line5c": "State and local personal property taxes",
    "scheduleA.line5d": "State and local taxes before cap",
    "scheduleA.line5e": "State and local taxes (capped)",
    "scheduleA.line8a": "Home mortgage interest",
    "scheduleA.line11": "Gifts by cash or check",
    "scheduleA.line12": "Gifts other than cash",
    "scheduleA.line14": "Total gifts to charity",
    "scheduleA.line16": "Other itemized deductions",
    "scheduleA.line17": "Total itemized deductions",
    # Schedule C
    "scheduleC.necIncome": "Nonemployee compensation (1099-NEC)",
    "scheduleC.totalNetProfit": "Net profit or (loss)",
    # Schedule D
    "scheduleD.line1a": "Short-term transactions",
    "scheduleD.line5": "Short-term gain from K-1s",
    "scheduleD.line7": "Net short-term capital gain or (loss)",
    "scheduleD.line8a": "Long-term transactions",
    "scheduleD.line12": "Long-term gain from K-1s",
    "scheduleD.line13": "Capital gain distributions",
    "scheduleD.line15": "Net long-term capital gain or (loss)",
    "scheduleD.line16": "Combined capital gain or (loss)",
    "scheduleD.line21": "Allowed capital gain or (loss)",
    # Schedule E
    "scheduleE.line23a": "Total rental and royalty income or (loss)",
    "scheduleE.line25": "Rental loss allowed",
    "scheduleE.line26": "Total rental real estate and royalty income or (loss)",
    # Schedule SE
    "scheduleSE.line2": "Net self-employment profit",
    "scheduleSE.line4a": "Net earnings from self-employment",
    "scheduleSE.line8a": "Social security wages",
    "scheduleSE.line9": "Remaining social security wage base",
    "scheduleSE.line10": "Social security portion",
    "scheduleSE.line11": "Medicare portion",
    "scheduleSE.line12": "Self-employment tax",
    "scheduleSE.line13": "Deduction for one-half of self-employment tax",
    # Schedule K-1
    "k1.totalOrdinaryIncome": "K-1 ordinary business income",
    "k1.totalRentalIncome": "K-1 rental real estate income",
    "k1.totalGuaranteedPayments": "K-1 guaranteed payments",
    "k1.totalInterest": "K-1 interest income",
    "k1.totalDividends": "K-1 dividends",
    "k1.totalSTCapitalGain": "K-1 short-term capital gain",
    "k1.totalLTCapitalGain": "K-1 long-term capital gain",
    "k1.totalQBI": "K-1 qualified business income",
    "k1.totalSEEarnings": "K-1 self-employment earnings",
    "k1.totalPassthroughIncome": "K-1 passthrough income",
    "k1.allowedRentalIncome": "K-1 rental income after loss allowance",
    # Form 8582
    "form8582.preliminaryAGI": "Modified AGI for rental loss allowance",
    "form8582.specialAllowance": "Rental loss special allowance",
    # QBI
    "qbi.deduction": "Qualified business income deduction",
    # Form 6251
    "form6251.line1": "Taxable income for AMT",
    "form6251.line2a": "State and local tax add-back",
    "form6251.line2i": "Incentive stock option spread",
    "form6251.line4": "Alternative minimum taxable income",
    "form6251.line5": "AMT exemption",
    "form6251.line6": "AMTI after exemption",
    "form6251.line9": "Tentative minimum tax",
    "form6251.line11": "Alternative minimum tax",
    # Credits
    "ctc.initialCredit": "Child tax credit before phase-out",
    "ctc.creditAfterPhaseOut": "Child tax credit after phase-out",
    "ctc.nonRefundableCredit": "Nonrefundable child tax credit",
    "ctc.additionalCredit": "Additional child tax credit",
    "eic.investmentIncome": "Investment income (EIC)",
    "eic.creditAmount": "Earned income credit",
    # Surtaxes
    "form8960.netInvestmentIncome": "Net investment income",
    "form8960.niit": "Net investment income tax",
    "form8959.line1": "Medicare wages",
    "form8959.additionalMedicareTax": "Additional Medicare tax",
}
